"""Catalog service - read-only browsing of experiences and their slots."""

import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from bookings.domain import Experience, ExperienceId, Slot
from bookings.domain.errors import InternalError, NotFoundError
from bookings.services.booking_service import parse_id
from bookings.services.slot_ledger import SlotLedger
from bookings.stores.interfaces import BookingStore, StoreError

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for experience catalog operations."""

    def __init__(
        self, store: BookingStore, clock: Callable[[], datetime] = timezone.now
    ) -> None:
        self._store = store
        self._clock = clock
        self._slots = SlotLedger(store)

    def list_experiences(self, search: str | None = None) -> list[Experience]:
        """Return all experiences, optionally filtered by a search term."""
        search = search.strip() if search else None
        try:
            return self._store.list_experiences(search or None)
        except StoreError as exc:
            logger.exception("Storage failure while listing experiences")
            raise InternalError() from exc

    def get_experience(self, experience_id: str) -> Experience:
        """Return an experience by ID.

        Raises:
            InvalidFieldError: If the experience_id is not a valid UUID.
            NotFoundError: If the experience does not exist.
        """
        parsed = parse_id(ExperienceId, experience_id, "experience_id")
        try:
            experience = self._store.get_experience(parsed)
        except StoreError as exc:
            logger.exception("Storage failure while reading experience %s", parsed)
            raise InternalError() from exc
        if experience is None:
            raise NotFoundError("Experience", experience_id)
        return experience

    def get_upcoming_slots(self, experience_id: str) -> list[Slot]:
        """Return slots of an experience from now onward, earliest first.

        Raises:
            InvalidFieldError: If the experience_id is not a valid UUID.
            NotFoundError: If the experience does not exist.
        """
        experience = self.get_experience(experience_id)
        try:
            return self._slots.upcoming(experience.id, self._clock())
        except StoreError as exc:
            logger.exception("Storage failure while listing slots of %s", experience.id)
            raise InternalError() from exc
