"""Promo code ledger: lookup, validation and redemption of discount codes."""

import logging
from datetime import datetime

from bookings.domain import PromoCode
from bookings.domain.errors import (
    InternalError,
    InvalidPromoError,
    MissingFieldError,
    NotFoundError,
)
from bookings.stores.interfaces import BookingStore, StoreError

logger = logging.getLogger(__name__)


def normalize(code: str) -> str:
    """Codes are stored trimmed and uppercased."""
    return code.strip().upper()


class PromoCodeLedger:
    """Validates promo codes and tracks how often they were redeemed."""

    def __init__(self, store: BookingStore) -> None:
        self._store = store

    def find(self, code: str) -> PromoCode | None:
        return self._store.find_promo_code(normalize(code))

    def validate(self, promo_code: PromoCode | None, now: datetime) -> None:
        """Raise InvalidPromoError unless ``promo_code`` can be redeemed at ``now``."""
        if promo_code is None or not promo_code.is_active:
            raise InvalidPromoError("Promo code is invalid or inactive")
        if promo_code.is_expired(now):
            raise InvalidPromoError("Promo code has expired")
        if promo_code.is_exhausted():
            raise InvalidPromoError("Promo code usage limit reached")

    def redeem(self, promo_code: PromoCode) -> None:
        """Count one use of ``promo_code``.

        Must run inside the store's atomic scope together with the booking
        that used the code.
        """
        if not self._store.increment_used_count(promo_code.id):
            logger.info("Promo code %s ran out of uses concurrently", promo_code.code)
            raise InvalidPromoError("Promo code usage limit reached")

    def apply(self, code: str | None, now: datetime) -> PromoCode:
        """Advisory pre-check of a code typed in by a customer.

        The result may be stale by the time a booking is submitted; the
        booking transaction validates the code again.

        Raises:
            MissingFieldError: If no code was given.
            NotFoundError: If no promo code is stored under ``code``.
            InvalidPromoError: If the code is inactive, expired or used up.
        """
        if not isinstance(code, str) or not code.strip():
            raise MissingFieldError("code")
        try:
            promo_code = self.find(code)
        except StoreError as exc:
            logger.exception("Storage failure while looking up a promo code")
            raise InternalError() from exc
        if promo_code is None:
            raise NotFoundError("Promo code", code)
        self.validate(promo_code, now)
        return promo_code
