from django.urls import path

from bookings.handlers import (
    BookingCreateView,
    BookingDetailView,
    ExperienceDetailView,
    ExperienceListView,
    PromoCodeApplyView,
    SlotListView,
)

urlpatterns = [
    path("experiences", ExperienceListView.as_view(), name="experience-list"),
    path(
        "experiences/<str:experience_id>",
        ExperienceDetailView.as_view(),
        name="experience-detail",
    ),
    path(
        "experiences/<str:experience_id>/slots",
        SlotListView.as_view(),
        name="slot-list",
    ),
    path("promo-codes/apply", PromoCodeApplyView.as_view(), name="promo-code-apply"),
    path("bookings", BookingCreateView.as_view(), name="booking-create"),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
]
