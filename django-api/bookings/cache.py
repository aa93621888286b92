"""Cache keys for catalog responses."""

from uuid import UUID

from django.core.cache import cache

EXPERIENCE_LIST_KEY = "experiences:list"


def experience_detail_key(experience_id: object) -> str:
    """Key on the canonical UUID text so every spelling of an id shares one entry.

    Raises:
        ValueError: If ``experience_id`` is not a UUID.
    """
    return f"experiences:{UUID(str(experience_id))}"


def invalidate_experience(experience_id: object) -> None:
    cache.delete_many([EXPERIENCE_LIST_KEY, experience_detail_key(experience_id)])
