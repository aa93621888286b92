"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from bookings.cache import invalidate_experience
from bookings.models import Experience


@receiver([post_save, post_delete], sender=Experience)
def invalidate_experience_cache(sender, instance, **kwargs):
    """Invalidate caches when an experience is saved or deleted."""
    invalidate_experience(str(instance.pk))
