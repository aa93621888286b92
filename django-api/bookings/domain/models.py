"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from bookings.domain.value_objects import (
    BookingId,
    Capacity,
    Discount,
    DiscountType,
    ExperienceId,
    Money,
    PromoCodeId,
    SlotId,
)


@dataclass(frozen=True)
class Experience:
    """Domain representation of an Experience."""

    id: ExperienceId
    title: str
    description: str
    about: str
    location: str
    base_price: Money
    image_url: str | None
    images: tuple[str, ...]
    duration: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Slot:
    """Domain representation of a bookable time Slot."""

    id: SlotId
    experience_id: ExperienceId
    starts_at: datetime
    total_capacity: Capacity
    booked_count: Capacity
    created_at: datetime

    @property
    def available(self) -> int:
        return self.total_capacity.value - self.booked_count.value


@dataclass(frozen=True)
class PromoCode:
    """Domain representation of a PromoCode."""

    id: PromoCodeId
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    is_active: bool
    expires_at: datetime | None
    usage_limit: int | None
    used_count: int
    created_at: datetime

    @property
    def discount(self) -> Discount:
        return Discount(discount_type=self.discount_type, value=self.discount_value)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit


class BookingStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class NewBooking:
    """Booking fields decided by the coordinator, before the store assigns an id."""

    experience_id: ExperienceId
    slot_id: SlotId
    starts_at: datetime
    customer_name: str
    customer_email: str
    quantity: int
    total_price: Money
    promo_code_id: PromoCodeId | None
    status: BookingStatus = BookingStatus.CONFIRMED


@dataclass(frozen=True)
class Booking:
    """Domain representation of a committed Booking."""

    id: BookingId
    experience_id: ExperienceId
    slot_id: SlotId
    starts_at: datetime
    customer_name: str
    customer_email: str
    quantity: int
    total_price: Money
    promo_code_id: PromoCodeId | None
    status: BookingStatus
    created_at: datetime


@dataclass(frozen=True)
class BookingRequest:
    """Raw booking input as received from the caller.

    Fields are untyped on purpose: parsing and validation belong to the
    coordinator so that every failure maps onto a domain error code.
    ``total_price`` is the caller's display total and is never persisted.
    """

    experience_id: object = None
    slot_id: object = None
    customer_name: object = None
    customer_email: object = None
    quantity: object = 1
    promo_code_id: object = None
    total_price: object = None


class BookingState(Enum):
    """Progress of a single booking attempt."""

    STARTED = "started"
    VALIDATED = "validated"
    PRICED = "priced"
    COMMITTED = "committed"
    ABORTED = "aborted"
