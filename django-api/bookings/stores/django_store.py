"""Django ORM implementation of the BookingStore."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Q, QuerySet

from bookings import models
from bookings.domain import (
    Booking,
    BookingId,
    BookingStatus,
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
from bookings.stores.interfaces import BookingStore, StoreConflictError, StoreError

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


def _is_conflict(exc: DatabaseError) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    cause = exc.__cause__
    sqlstate = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    return sqlstate in _CONFLICT_SQLSTATES


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        if _is_conflict(exc):
            raise StoreConflictError(str(exc)) from exc
        raise StoreError(str(exc)) from exc


def _lock_queryset_if_possible(queryset: QuerySet) -> QuerySet:
    """Apply select_for_update when inside transaction.atomic()."""
    if not transaction.get_connection().in_atomic_block:
        return queryset
    return queryset.select_for_update()


def _experience_to_domain(obj: models.Experience) -> Experience:
    return Experience(
        id=ExperienceId(obj.id),
        title=obj.title,
        description=obj.description,
        about=obj.about,
        location=obj.location,
        base_price=Money(obj.base_price),
        image_url=obj.image_url,
        images=tuple(obj.images or ()),
        duration=obj.duration,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


def _slot_to_domain(obj: models.Slot) -> Slot:
    return Slot(
        id=SlotId(obj.id),
        experience_id=ExperienceId(obj.experience_id),
        starts_at=obj.starts_at,
        total_capacity=Capacity(obj.total_capacity),
        booked_count=Capacity(obj.booked_count),
        created_at=obj.created_at,
    )


def _promo_code_to_domain(obj: models.PromoCode) -> PromoCode:
    return PromoCode(
        id=PromoCodeId(obj.id),
        code=obj.code,
        discount_type=DiscountType(obj.discount_type),
        discount_value=obj.discount_value,
        is_active=obj.is_active,
        expires_at=obj.expires_at,
        usage_limit=obj.usage_limit,
        used_count=obj.used_count,
        created_at=obj.created_at,
    )


def _booking_to_domain(obj: models.Booking) -> Booking:
    return Booking(
        id=BookingId(obj.id),
        experience_id=ExperienceId(obj.experience_id),
        slot_id=SlotId(obj.slot_id),
        starts_at=obj.starts_at,
        customer_name=obj.customer_name,
        customer_email=obj.customer_email,
        quantity=obj.quantity,
        total_price=Money(obj.total_price),
        promo_code_id=PromoCodeId(obj.promo_code_id) if obj.promo_code_id else None,
        status=BookingStatus(obj.status),
        created_at=obj.created_at,
    )


class DjangoBookingStore(BookingStore):
    """Relational store using the Django ORM.

    Capacity and usage counters are only ever changed with conditional
    UPDATE statements, so the database re-checks each invariant at write time.
    """

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with _storage_errors(), transaction.atomic():
            yield

    @_storage_errors()
    def list_experiences(self, search: str | None = None) -> list[Experience]:
        queryset = models.Experience.objects.order_by("-created_at")
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search)
                | Q(description__icontains=search)
                | Q(location__icontains=search)
            )
        return [_experience_to_domain(obj) for obj in queryset]

    @_storage_errors()
    def get_experience(self, experience_id: ExperienceId) -> Experience | None:
        obj = models.Experience.objects.filter(pk=experience_id.value).first()
        return _experience_to_domain(obj) if obj else None

    @_storage_errors()
    def get_slot(self, slot_id: SlotId, *, for_update: bool = False) -> Slot | None:
        queryset = models.Slot.objects.filter(pk=slot_id.value)
        if for_update:
            queryset = _lock_queryset_if_possible(queryset)
        obj = queryset.first()
        return _slot_to_domain(obj) if obj else None

    @_storage_errors()
    def list_slots_from(self, experience_id: ExperienceId, since: datetime) -> list[Slot]:
        queryset = models.Slot.objects.filter(
            experience_id=experience_id.value, starts_at__gte=since
        ).order_by("starts_at")
        return [_slot_to_domain(obj) for obj in queryset]

    @_storage_errors()
    def increment_booked_count(self, slot_id: SlotId, quantity: int) -> bool:
        updated = models.Slot.objects.filter(
            pk=slot_id.value,
            booked_count__lte=F("total_capacity") - quantity,
        ).update(booked_count=F("booked_count") + quantity)
        return updated == 1

    @_storage_errors()
    def get_promo_code(
        self, promo_code_id: PromoCodeId, *, for_update: bool = False
    ) -> PromoCode | None:
        queryset = models.PromoCode.objects.filter(pk=promo_code_id.value)
        if for_update:
            queryset = _lock_queryset_if_possible(queryset)
        obj = queryset.first()
        return _promo_code_to_domain(obj) if obj else None

    @_storage_errors()
    def find_promo_code(self, code: str) -> PromoCode | None:
        obj = models.PromoCode.objects.filter(code=code).first()
        return _promo_code_to_domain(obj) if obj else None

    @_storage_errors()
    def increment_used_count(self, promo_code_id: PromoCodeId) -> bool:
        updated = (
            models.PromoCode.objects.filter(pk=promo_code_id.value)
            .filter(Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit")))
            .update(used_count=F("used_count") + 1)
        )
        return updated == 1

    @_storage_errors()
    def create_booking(self, booking: NewBooking) -> Booking:
        obj = models.Booking.objects.create(
            experience_id=booking.experience_id.value,
            slot_id=booking.slot_id.value,
            starts_at=booking.starts_at,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            quantity=booking.quantity,
            total_price=booking.total_price.amount,
            promo_code_id=booking.promo_code_id.value if booking.promo_code_id else None,
            status=booking.status.value,
        )
        return _booking_to_domain(obj)

    @_storage_errors()
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        obj = models.Booking.objects.filter(pk=booking_id.value).first()
        return _booking_to_domain(obj) if obj else None
