"""Integration tests for the Django ORM store and the coordinator on top of it.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import IntegrityError, OperationalError
from django.utils import timezone

from bookings import models
from bookings.domain import BookingId, BookingRequest, ExperienceId, PromoCodeId, SlotId
from bookings.domain.errors import InternalError, InvalidPromoError
from bookings.services import BookingService
from bookings.stores import DjangoBookingStore, StoreConflictError, StoreError


def _request(experience, slot, **overrides) -> BookingRequest:
    fields = dict(
        experience_id=str(experience.id),
        slot_id=str(slot.id),
        customer_name="Ravi",
        customer_email="ravi@example.com",
    )
    fields.update(overrides)
    return BookingRequest(**fields)


@pytest.mark.django_db
class TestDjangoBookingStore:
    def test_increment_booked_count_respects_capacity(self, slot):
        store = DjangoBookingStore()

        assert store.increment_booked_count(SlotId(slot.id), 5) is True
        assert store.increment_booked_count(SlotId(slot.id), 1) is False

        slot.refresh_from_db()
        assert slot.booked_count == 5

    def test_increment_used_count_respects_limit(self, promo_code):
        store = DjangoBookingStore()

        assert all(store.increment_used_count(PromoCodeId(promo_code.id)) for _ in range(3))
        assert store.increment_used_count(PromoCodeId(promo_code.id)) is False

        promo_code.refresh_from_db()
        assert promo_code.used_count == 3

    def test_unlimited_promo_code_keeps_counting(self, promo_code):
        promo_code.usage_limit = None
        promo_code.save()
        store = DjangoBookingStore()

        for _ in range(5):
            assert store.increment_used_count(PromoCodeId(promo_code.id))

    def test_locking_read_works_inside_and_outside_atomic(self, slot, promo_code):
        store = DjangoBookingStore()

        assert store.get_slot(SlotId(slot.id), for_update=True).id.value == slot.id
        with store.atomic():
            assert store.get_slot(SlotId(slot.id), for_update=True).id.value == slot.id
            locked = store.get_promo_code(PromoCodeId(promo_code.id), for_update=True)
            assert locked.code == "SAVE10"

    def test_experience_gallery_round_trips(self, experience):
        experience.images = ["https://img.example.com/a.jpg"]
        experience.save()

        loaded = DjangoBookingStore().get_experience(ExperienceId(experience.id))

        assert loaded.images == ("https://img.example.com/a.jpg",)

    def test_promo_codes_are_stored_uppercase(self, promo_code):
        assert promo_code.code == "SAVE10"
        assert DjangoBookingStore().find_promo_code("SAVE10").id.value == promo_code.id

    def test_list_slots_from_excludes_past_and_orders(self, experience, slot):
        past = models.Slot.objects.create(
            experience=experience, starts_at=timezone.now() - timedelta(hours=1)
        )
        later = models.Slot.objects.create(
            experience=experience, starts_at=timezone.now() + timedelta(days=3)
        )

        slots = DjangoBookingStore().list_slots_from(ExperienceId(experience.id), timezone.now())

        assert [s.id.value for s in slots] == [slot.id, later.id]
        assert past.id not in [s.id.value for s in slots]

    def test_list_experiences_search_is_case_insensitive(self, experience):
        models.Experience.objects.create(
            title="Scuba", description="Reef dive", location="Andaman", base_price=Decimal("5")
        )
        store = DjangoBookingStore()

        assert [e.title for e in store.list_experiences("MANALI")] == ["Sunrise Trek"]
        assert len(store.list_experiences()) == 2

    def test_capacity_constraint_backs_the_ledger(self, slot):
        slot.booked_count = slot.total_capacity + 1
        with pytest.raises(IntegrityError):
            slot.save()

    def test_integrity_error_maps_to_conflict(self, slot):
        store = DjangoBookingStore()
        with pytest.raises(StoreConflictError):
            with store.atomic():
                models.Slot.objects.filter(pk=slot.pk).update(booked_count=99)

    def test_operational_error_maps_to_store_error(self, monkeypatch):
        store = DjangoBookingStore()

        def broken(*args, **kwargs):
            raise OperationalError("database is locked")

        monkeypatch.setattr(models.Booking.objects, "filter", broken)
        with pytest.raises(StoreError) as excinfo:
            store.get_booking(BookingId(uuid4()))
        assert not isinstance(excinfo.value, StoreConflictError)


@pytest.mark.django_db
class TestBookingServiceWithDjangoStore:
    def test_submit_persists_commit_set(self, experience, slot, promo_code):
        booking = BookingService(DjangoBookingStore()).submit(
            _request(experience, slot, quantity=2, promo_code_id=str(promo_code.id))
        )

        stored = models.Booking.objects.get(pk=booking.id.value)
        assert stored.total_price == Decimal("1980.00")
        assert stored.status == models.Booking.Status.CONFIRMED
        assert stored.promo_code_id == promo_code.id
        slot.refresh_from_db()
        promo_code.refresh_from_db()
        assert slot.booked_count == 2
        assert promo_code.used_count == 1

    def test_re_read_is_identical(self, experience, slot):
        service = BookingService(DjangoBookingStore())
        created = service.submit(_request(experience, slot))

        assert service.get_booking(str(created.id)) == service.get_booking(str(created.id))

    def test_late_failure_rolls_back_booking_and_capacity(self, experience, slot, promo_code):
        class LosingStore(DjangoBookingStore):
            def increment_used_count(self, promo_code_id):
                return False

        with pytest.raises(InvalidPromoError):
            BookingService(LosingStore()).submit(
                _request(experience, slot, promo_code_id=str(promo_code.id))
            )

        slot.refresh_from_db()
        assert slot.booked_count == 0
        assert models.Booking.objects.count() == 0

    def test_storage_failure_surfaces_as_internal(self, experience, slot):
        class FailingStore(DjangoBookingStore):
            def create_booking(self, booking):
                raise StoreError("connection reset")

        with pytest.raises(InternalError):
            BookingService(FailingStore()).submit(_request(experience, slot))

        slot.refresh_from_db()
        assert slot.booked_count == 0
