"""Slot ledger: per-slot capacity checks and reservations."""

import logging
from datetime import datetime

from bookings.domain import ExperienceId, Slot
from bookings.domain.errors import CapacityExceededError
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


class SlotLedger:
    """Tracks and enforces slot capacity."""

    def __init__(self, store: BookingStore) -> None:
        self._store = store

    def check_capacity(self, slot: Slot, quantity: int) -> None:
        """Raise CapacityExceededError if ``quantity`` does not fit in ``slot``."""
        if slot.booked_count.value + quantity > slot.total_capacity.value:
            raise CapacityExceededError()

    def reserve(self, slot: Slot, quantity: int) -> None:
        """Add ``quantity`` to the slot's booked count.

        Must run inside the store's atomic scope together with the booking it
        pays for. The store re-checks capacity as part of the write, so a
        concurrent reservation that got there first still fails here.
        """
        if not self._store.increment_booked_count(slot.id, quantity):
            logger.info("Slot %s lost capacity to a concurrent booking", slot.id)
            raise CapacityExceededError()

    def upcoming(self, experience_id: ExperienceId, now: datetime) -> list[Slot]:
        return self._store.list_slots_from(experience_id, now)
