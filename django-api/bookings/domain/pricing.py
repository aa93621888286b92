"""Pricing calculator.

Pure and deterministic: the same inputs always produce the same breakdown.
Callers may price a booking for display, but only the breakdown computed
inside the booking transaction is persisted.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from bookings.domain.value_objects import Discount, DiscountType

TAX_RATE = Decimal("0.10")

# Twelve digits, two of them after the point.
MAX_TOTAL = Decimal("9999999999.99")

_CENT = Decimal("0.01")
_ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def _quantize(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def calculate_price(
    unit_price: Decimal,
    quantity: int,
    discount: Discount | None = None,
) -> PriceBreakdown:
    """Price ``quantity`` units at ``unit_price`` with an optional discount.

    The discount is capped at the subtotal, tax applies after the discount,
    and no amount is ever negative.

    Raises:
        ValueError: If ``unit_price`` is negative or ``quantity`` is below 1.
    """
    if unit_price < 0:
        raise ValueError("unit_price cannot be negative")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError("quantity must be a positive integer")

    subtotal = _quantize(Decimal(unit_price) * quantity)

    amount_off = _ZERO
    if discount is not None:
        if discount.discount_type is DiscountType.PERCENTAGE:
            raw = subtotal * discount.value / Decimal(100)
        else:
            raw = discount.value
        amount_off = _quantize(min(raw, subtotal))

    taxable = subtotal - amount_off
    tax = _quantize(taxable * TAX_RATE)
    total = max(_ZERO, taxable + tax)

    return PriceBreakdown(subtotal=subtotal, discount=amount_off, tax=tax, total=total)
