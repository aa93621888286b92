"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from bookings import models
from bookings.domain import DiscountType
from bookings.stores import InMemoryBookingStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_store() -> InMemoryBookingStore:
    store = InMemoryBookingStore()
    kayak = store.add_experience(
        "Kayaking", Decimal("1000.00"), description="Paddle the bay", location="Goa"
    )
    store.add_slot(kayak.id, timezone.now() + timedelta(days=1), total_capacity=5)
    store.add_slot(kayak.id, timezone.now() + timedelta(days=2), total_capacity=1)

    store.add_promo_code("SAVE10", DiscountType.PERCENTAGE, Decimal("10"))
    store.add_promo_code("FLAT100", DiscountType.FLAT, Decimal("100"), usage_limit=5)
    store.add_promo_code("LASTONE", DiscountType.FLAT, Decimal("50"), usage_limit=1)
    store.add_promo_code("USEDUP", DiscountType.FLAT, Decimal("50"), usage_limit=2, used_count=2)
    store.add_promo_code("OFF", DiscountType.FLAT, Decimal("50"), is_active=False)
    store.add_promo_code(
        "OLD",
        DiscountType.FLAT,
        Decimal("50"),
        expires_at=timezone.now() - timedelta(days=1),
    )
    return store


@pytest.fixture
def kayak(memory_store):
    return memory_store.list_experiences("Kayaking")[0]


@pytest.fixture
def open_slot(memory_store, kayak):
    """Five seats, none booked."""
    return memory_store.list_slots_from(kayak.id, timezone.now())[0]


@pytest.fixture
def last_seat_slot(memory_store, kayak):
    """A single seat, none booked."""
    return memory_store.list_slots_from(kayak.id, timezone.now())[1]


@pytest.fixture
def experience(db) -> models.Experience:
    return models.Experience.objects.create(
        title="Sunrise Trek",
        description="Guided hike to the summit",
        location="Manali",
        base_price=Decimal("1000.00"),
    )


@pytest.fixture
def slot(experience) -> models.Slot:
    return models.Slot.objects.create(
        experience=experience,
        starts_at=timezone.now() + timedelta(days=1),
        total_capacity=5,
    )


@pytest.fixture
def promo_code(db) -> models.PromoCode:
    return models.PromoCode.objects.create(
        code="save10",
        discount_type=models.PromoCode.DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        usage_limit=3,
    )
