"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class ExperienceSerializer(serializers.Serializer):
    """Serializer for Experience domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    about = serializers.CharField()
    location = serializers.CharField()
    basePrice = serializers.DecimalField(
        source="base_price.amount", max_digits=10, decimal_places=2
    )
    imageUrl = serializers.CharField(source="image_url", allow_null=True)
    images = serializers.ListField(child=serializers.CharField())
    duration = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class SlotSerializer(serializers.Serializer):
    """Serializer for Slot domain model."""

    id = serializers.UUIDField(source="id.value")
    experienceId = serializers.UUIDField(source="experience_id.value")
    startsAt = serializers.DateTimeField(source="starts_at")
    totalCapacity = serializers.IntegerField(source="total_capacity.value")
    bookedCount = serializers.IntegerField(source="booked_count.value")
    available = serializers.IntegerField()


class PromoCodeSerializer(serializers.Serializer):
    """Public fields of a PromoCode; usage counters stay private."""

    id = serializers.UUIDField(source="id.value")
    code = serializers.CharField()
    discountType = serializers.CharField(source="discount_type.value")
    discountValue = serializers.DecimalField(
        source="discount_value", max_digits=10, decimal_places=2
    )


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    experienceId = serializers.UUIDField(source="experience_id.value")
    slotId = serializers.UUIDField(source="slot_id.value")
    startsAt = serializers.DateTimeField(source="starts_at")
    customerName = serializers.CharField(source="customer_name")
    customerEmail = serializers.CharField(source="customer_email")
    quantity = serializers.IntegerField()
    totalPrice = serializers.DecimalField(
        source="total_price.amount", max_digits=12, decimal_places=2
    )
    promoCodeId = serializers.SerializerMethodField()
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at")

    def get_promoCodeId(self, booking) -> str | None:
        return str(booking.promo_code_id) if booking.promo_code_id else None
