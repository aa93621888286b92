from bookings.handlers.views import (
    BookingCreateView,
    BookingDetailView,
    ExperienceDetailView,
    ExperienceListView,
    PromoCodeApplyView,
    SlotListView,
)

__all__ = [
    "BookingCreateView",
    "BookingDetailView",
    "ExperienceDetailView",
    "ExperienceListView",
    "PromoCodeApplyView",
    "SlotListView",
]
