"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Storage-engine failures
are raised as StoreError / StoreConflictError with the engine exception
chained as the cause; services decide how to report them.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from bookings.domain import (
    Booking,
    BookingId,
    Experience,
    ExperienceId,
    NewBooking,
    PromoCode,
    PromoCodeId,
    Slot,
    SlotId,
)


class StoreError(Exception):
    """The storage layer failed (unavailable, timed out, ...)."""


class StoreConflictError(StoreError):
    """A concurrent writer invalidated the current transaction."""


class BookingStore(ABC):
    """Interface for experience, slot, promo code and booking persistence."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a transactional scope.

        Everything read and written inside the scope commits together when it
        exits normally and is discarded when it exits with an exception.
        """
        ...

    @abstractmethod
    def list_experiences(self, search: str | None = None) -> list[Experience]:
        """Return experiences ordered by created_at descending.

        With ``search``, only those whose title, description or location
        contains it (case-insensitive).
        """
        ...

    @abstractmethod
    def get_experience(self, experience_id: ExperienceId) -> Experience | None:
        """Return an experience by ID, or None if not found."""
        ...

    @abstractmethod
    def get_slot(self, slot_id: SlotId, *, for_update: bool = False) -> Slot | None:
        """Return a slot by ID, or None. ``for_update`` locks the row."""
        ...

    @abstractmethod
    def list_slots_from(self, experience_id: ExperienceId, since: datetime) -> list[Slot]:
        """Return slots starting at or after ``since``, ordered by starts_at ascending."""
        ...

    @abstractmethod
    def increment_booked_count(self, slot_id: SlotId, quantity: int) -> bool:
        """Add ``quantity`` to booked_count if it stays within total_capacity.

        Returns False when no row was updated.
        """
        ...

    @abstractmethod
    def get_promo_code(
        self, promo_code_id: PromoCodeId, *, for_update: bool = False
    ) -> PromoCode | None:
        """Return a promo code by ID, or None. ``for_update`` locks the row."""
        ...

    @abstractmethod
    def find_promo_code(self, code: str) -> PromoCode | None:
        """Return the promo code stored under the normalized ``code``, or None."""
        ...

    @abstractmethod
    def increment_used_count(self, promo_code_id: PromoCodeId) -> bool:
        """Add one to used_count if it stays within usage_limit.

        Returns False when no row was updated.
        """
        ...

    @abstractmethod
    def create_booking(self, booking: NewBooking) -> Booking:
        """Persist a new booking and return it with its id and timestamps."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...
