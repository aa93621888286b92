"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone

from bookings.domain import (
    Capacity,
    Discount,
    DiscountType,
    ExperienceId,
    Money,
    PromoCode,
    PromoCodeId,
)
from bookings.domain.errors import ErrorCode, NotFoundError


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        assert Money(Decimal("10.50")).amount == Decimal("10.50")

    def test_money_accepts_zero(self):
        assert Money(Decimal("0")).amount == Decimal("0")

    def test_money_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        assert str(Money(Decimal("7.5"))) == "7.50"


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        assert Capacity(15).value == 15

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-1)


class TestDiscount:
    def test_discount_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Discount(DiscountType.FLAT, Decimal("-5"))


class TestExperienceId:
    """Tests for ExperienceId value object."""

    def test_from_string_valid_uuid(self):
        raw = uuid4()
        assert ExperienceId.from_string(str(raw)).value == raw

    def test_from_string_invalid_uuid(self):
        with pytest.raises(ValueError):
            ExperienceId.from_string("not-a-uuid")


class TestPromoCode:
    def _promo(self, **overrides) -> PromoCode:
        fields = dict(
            id=PromoCodeId(uuid4()),
            code="SAVE10",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            is_active=True,
            expires_at=None,
            usage_limit=None,
            used_count=0,
            created_at=timezone.now(),
        )
        fields.update(overrides)
        return PromoCode(**fields)

    def test_unlimited_code_is_never_exhausted(self):
        assert not self._promo(used_count=10_000).is_exhausted()

    def test_code_at_limit_is_exhausted(self):
        assert self._promo(usage_limit=2, used_count=2).is_exhausted()

    def test_expiry_is_compared_with_now(self):
        now = timezone.now()
        promo = self._promo(expires_at=now)
        assert not promo.is_expired(now)
        assert promo.is_expired(now + timedelta(seconds=1))

    def test_discount_carries_type_and_value(self):
        assert self._promo().discount == Discount(DiscountType.PERCENTAGE, Decimal("10"))


class TestDomainError:
    def test_str_includes_code(self):
        error = NotFoundError("Slot", "abc")
        assert error.code is ErrorCode.NOT_FOUND
        assert str(error) == "NOT_FOUND: Slot not found"
        assert error.entity_id == "abc"
