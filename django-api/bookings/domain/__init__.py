from bookings.domain.models import (
    Booking,
    BookingRequest,
    BookingState,
    BookingStatus,
    Experience,
    NewBooking,
    PromoCode,
    Slot,
)
from bookings.domain.pricing import (
    MAX_TOTAL,
    TAX_RATE,
    PriceBreakdown,
    calculate_price,
)
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

__all__ = [
    "Booking",
    "BookingRequest",
    "BookingState",
    "BookingStatus",
    "Experience",
    "NewBooking",
    "PromoCode",
    "Slot",
    "ExperienceId",
    "SlotId",
    "PromoCodeId",
    "BookingId",
    "Money",
    "Capacity",
    "Discount",
    "DiscountType",
    "PriceBreakdown",
    "MAX_TOTAL",
    "TAX_RATE",
    "calculate_price",
]
