"""Booking service - the booking transaction coordinator.

A submission either commits a confirmed booking together with the slot
reservation and promo redemption it implies, or leaves storage untouched.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TypeVar

from django.utils import timezone

from bookings.domain import (
    MAX_TOTAL,
    Booking,
    BookingId,
    BookingRequest,
    BookingState,
    Experience,
    ExperienceId,
    Money,
    NewBooking,
    PromoCode,
    PromoCodeId,
    Slot,
    SlotId,
    calculate_price,
)
from bookings.domain.errors import (
    DomainError,
    InternalError,
    InvalidFieldError,
    MissingFieldError,
    NotFoundError,
    TransactionConflictError,
)
from bookings.services.promo_ledger import PromoCodeLedger
from bookings.services.slot_ledger import SlotLedger
from bookings.stores.interfaces import BookingStore, StoreConflictError, StoreError

logger = logging.getLogger(__name__)

_Id = TypeVar("_Id", ExperienceId, SlotId, PromoCodeId, BookingId)


def parse_id(id_type: type[_Id], value: object, field: str) -> _Id:
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidFieldError(field) from None


def _required_id(id_type: type[_Id], value: object, field: str) -> _Id:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field)
    return parse_id(id_type, value, field)


def _required_text(value: object, field: str, max_length: int) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field)
    if not isinstance(value, str):
        raise InvalidFieldError(field)
    text = value.strip()
    if len(text) > max_length:
        raise InvalidFieldError(field, f"{field} must be at most {max_length} characters")
    return text


def _parse_quantity(value: object) -> int:
    if value is None:
        return 1
    if isinstance(value, bool):
        raise InvalidFieldError("quantity")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise InvalidFieldError("quantity", "quantity must be a positive integer")
    return value


def _parse_hint(value: object) -> Decimal | None:
    if value is None:
        return None
    try:
        hint = Decimal(str(value))
    except InvalidOperation:
        return None
    return hint if hint.is_finite() else None


@dataclass(frozen=True)
class _Command:
    experience_id: ExperienceId
    slot_id: SlotId
    customer_name: str
    customer_email: str
    quantity: int
    promo_code_id: PromoCodeId | None
    total_price_hint: Decimal | None


class BookingService:
    """Turns a booking request into a committed Booking or a no-op."""

    def __init__(
        self, store: BookingStore, clock: Callable[[], datetime] = timezone.now
    ) -> None:
        self._store = store
        self._clock = clock
        self._slots = SlotLedger(store)
        self._promo_codes = PromoCodeLedger(store)

    def submit(self, request: BookingRequest) -> Booking:
        """Create a confirmed booking.

        Raises:
            MissingFieldError: If a required field is absent or blank.
            InvalidFieldError: If an id, a name or the quantity is malformed, or
                the total is too large to record.
            NotFoundError: If the experience, slot or promo code does not exist.
            CapacityExceededError: If the slot cannot take the quantity.
            InvalidPromoError: If the promo code is inactive, expired or used up.
            TransactionConflictError: If a concurrent writer invalidated the attempt.
            InternalError: If storage failed.
        """
        command = self._parse(request)
        state = BookingState.STARTED
        try:
            with self._store.atomic():
                experience, slot = self._load(command)
                self._slots.check_capacity(slot, command.quantity)
                promo_code = self._load_promo_code(command)
                state = self._advance(state, BookingState.VALIDATED)

                breakdown = calculate_price(
                    experience.base_price.amount,
                    command.quantity,
                    promo_code.discount if promo_code else None,
                )
                if breakdown.total > MAX_TOTAL:
                    raise InvalidFieldError("quantity", "Booking total is too large")
                state = self._advance(state, BookingState.PRICED)
                if (
                    command.total_price_hint is not None
                    and command.total_price_hint != breakdown.total
                ):
                    logger.warning(
                        "Client total %s differs from authoritative total %s for slot %s",
                        command.total_price_hint,
                        breakdown.total,
                        slot.id,
                    )

                booking = self._store.create_booking(
                    NewBooking(
                        experience_id=experience.id,
                        slot_id=slot.id,
                        starts_at=slot.starts_at,
                        customer_name=command.customer_name,
                        customer_email=command.customer_email,
                        quantity=command.quantity,
                        total_price=Money(breakdown.total),
                        promo_code_id=promo_code.id if promo_code else None,
                    )
                )
                self._slots.reserve(slot, command.quantity)
                if promo_code is not None:
                    self._promo_codes.redeem(promo_code)
        except DomainError as exc:
            self._abort(state, exc)
            raise
        except StoreConflictError as exc:
            error = TransactionConflictError()
            self._abort(state, error)
            raise error from exc
        except StoreError as exc:
            logger.exception("Storage failure while booking slot %s", command.slot_id)
            error = InternalError()
            self._abort(state, error)
            raise error from exc

        self._advance(state, BookingState.COMMITTED)
        logger.info(
            "Booking %s created for slot %s (quantity=%s, total=%s)",
            booking.id,
            booking.slot_id,
            booking.quantity,
            booking.total_price,
        )
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        """Return a committed booking by ID.

        Raises:
            InvalidFieldError: If the booking_id is not a valid UUID.
            NotFoundError: If the booking does not exist.
        """
        parsed = parse_id(BookingId, booking_id, "booking_id")
        try:
            booking = self._store.get_booking(parsed)
        except StoreError as exc:
            logger.exception("Storage failure while reading booking %s", parsed)
            raise InternalError() from exc
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        return booking

    def _parse(self, request: BookingRequest) -> _Command:
        experience_id = _required_id(ExperienceId, request.experience_id, "experience_id")
        slot_id = _required_id(SlotId, request.slot_id, "slot_id")
        customer_name = _required_text(request.customer_name, "customer_name", 255)
        customer_email = _required_text(request.customer_email, "customer_email", 254).lower()
        promo_code_id = None
        if request.promo_code_id not in (None, ""):
            promo_code_id = parse_id(PromoCodeId, request.promo_code_id, "promo_code_id")
        return _Command(
            experience_id=experience_id,
            slot_id=slot_id,
            customer_name=customer_name,
            customer_email=customer_email,
            quantity=_parse_quantity(request.quantity),
            promo_code_id=promo_code_id,
            total_price_hint=_parse_hint(request.total_price),
        )

    def _load(self, command: _Command) -> tuple[Experience, Slot]:
        experience = self._store.get_experience(command.experience_id)
        if experience is None:
            raise NotFoundError("Experience", str(command.experience_id))
        slot = self._store.get_slot(command.slot_id, for_update=True)
        if slot is None or slot.experience_id != experience.id:
            raise NotFoundError("Slot", str(command.slot_id))
        return experience, slot

    def _load_promo_code(self, command: _Command) -> PromoCode | None:
        if command.promo_code_id is None:
            return None
        promo_code = self._store.get_promo_code(command.promo_code_id, for_update=True)
        if promo_code is None:
            raise NotFoundError("Promo code", str(command.promo_code_id))
        self._promo_codes.validate(promo_code, self._clock())
        return promo_code

    @staticmethod
    def _advance(current: BookingState, target: BookingState) -> BookingState:
        logger.debug("Booking attempt %s -> %s", current.name, target.name)
        return target

    @staticmethod
    def _abort(state: BookingState, error: DomainError) -> None:
        logger.info(
            "Booking aborted in state %s: %s",
            state.name,
            error.code.value,
        )
