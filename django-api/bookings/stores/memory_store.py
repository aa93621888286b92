"""In-process implementation of the BookingStore.

Holds domain models in dictionaries. A single re-entrant lock serializes
transactional scopes, and each scope restores a snapshot of every table if it
exits with an exception. Used by tests and by callers embedding the booking
engine without a database.
"""

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from django.utils import timezone

from bookings.domain import (
    Booking,
    BookingId,
    Capacity,
    DiscountType,
    Experience,
    ExperienceId,
    Money,
    NewBooking,
    PromoCode,
    PromoCodeId,
    Slot,
    SlotId,
)
from bookings.stores.interfaces import BookingStore


class InMemoryBookingStore(BookingStore):
    """Dictionary-backed store with serialized transactions."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.experiences: dict[ExperienceId, Experience] = {}
        self.slots: dict[SlotId, Slot] = {}
        self.promo_codes: dict[PromoCodeId, PromoCode] = {}
        self.bookings: dict[BookingId, Booking] = {}

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise

    def _snapshot(self) -> tuple[dict, ...]:
        return (
            dict(self.experiences),
            dict(self.slots),
            dict(self.promo_codes),
            dict(self.bookings),
        )

    def _restore(self, snapshot: tuple[dict, ...]) -> None:
        self.experiences, self.slots, self.promo_codes, self.bookings = snapshot

    # Seed helpers

    def add_experience(
        self,
        title: str,
        base_price: Decimal,
        description: str = "",
        location: str = "",
        about: str = "",
    ) -> Experience:
        now = timezone.now()
        experience = Experience(
            id=ExperienceId(uuid.uuid4()),
            title=title,
            description=description,
            about=about,
            location=location,
            base_price=Money(base_price),
            image_url=None,
            images=(),
            duration="1 Day",
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.experiences[experience.id] = experience
        return experience

    def add_slot(
        self,
        experience_id: ExperienceId,
        starts_at: datetime,
        total_capacity: int = 15,
        booked_count: int = 0,
    ) -> Slot:
        slot = Slot(
            id=SlotId(uuid.uuid4()),
            experience_id=experience_id,
            starts_at=starts_at,
            total_capacity=Capacity(total_capacity),
            booked_count=Capacity(booked_count),
            created_at=timezone.now(),
        )
        with self._lock:
            self.slots[slot.id] = slot
        return slot

    def add_promo_code(
        self,
        code: str,
        discount_type: DiscountType,
        discount_value: Decimal,
        is_active: bool = True,
        expires_at: datetime | None = None,
        usage_limit: int | None = None,
        used_count: int = 0,
    ) -> PromoCode:
        promo_code = PromoCode(
            id=PromoCodeId(uuid.uuid4()),
            code=code.strip().upper(),
            discount_type=discount_type,
            discount_value=discount_value,
            is_active=is_active,
            expires_at=expires_at,
            usage_limit=usage_limit,
            used_count=used_count,
            created_at=timezone.now(),
        )
        with self._lock:
            self.promo_codes[promo_code.id] = promo_code
        return promo_code

    # BookingStore

    def list_experiences(self, search: str | None = None) -> list[Experience]:
        with self._lock:
            experiences = list(self.experiences.values())
        if search:
            needle = search.casefold()
            experiences = [
                e
                for e in experiences
                if needle in e.title.casefold()
                or needle in e.description.casefold()
                or needle in e.location.casefold()
            ]
        return sorted(experiences, key=lambda e: e.created_at, reverse=True)

    def get_experience(self, experience_id: ExperienceId) -> Experience | None:
        with self._lock:
            return self.experiences.get(experience_id)

    def get_slot(self, slot_id: SlotId, *, for_update: bool = False) -> Slot | None:
        with self._lock:
            return self.slots.get(slot_id)

    def list_slots_from(self, experience_id: ExperienceId, since: datetime) -> list[Slot]:
        with self._lock:
            slots = [
                s
                for s in self.slots.values()
                if s.experience_id == experience_id and s.starts_at >= since
            ]
        return sorted(slots, key=lambda s: s.starts_at)

    def increment_booked_count(self, slot_id: SlotId, quantity: int) -> bool:
        with self._lock:
            slot = self.slots.get(slot_id)
            if slot is None or slot.booked_count.value + quantity > slot.total_capacity.value:
                return False
            self.slots[slot_id] = replace(
                slot, booked_count=Capacity(slot.booked_count.value + quantity)
            )
            return True

    def get_promo_code(
        self, promo_code_id: PromoCodeId, *, for_update: bool = False
    ) -> PromoCode | None:
        with self._lock:
            return self.promo_codes.get(promo_code_id)

    def find_promo_code(self, code: str) -> PromoCode | None:
        with self._lock:
            return next((p for p in self.promo_codes.values() if p.code == code), None)

    def increment_used_count(self, promo_code_id: PromoCodeId) -> bool:
        with self._lock:
            promo_code = self.promo_codes.get(promo_code_id)
            if promo_code is None or promo_code.is_exhausted():
                return False
            self.promo_codes[promo_code_id] = replace(
                promo_code, used_count=promo_code.used_count + 1
            )
            return True

    def create_booking(self, booking: NewBooking) -> Booking:
        created = Booking(
            id=BookingId(uuid.uuid4()),
            experience_id=booking.experience_id,
            slot_id=booking.slot_id,
            starts_at=booking.starts_at,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            quantity=booking.quantity,
            total_price=booking.total_price,
            promo_code_id=booking.promo_code_id,
            status=booking.status,
            created_at=timezone.now(),
        )
        with self._lock:
            self.bookings[created.id] = created
        return created

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        with self._lock:
            return self.bookings.get(booking_id)
