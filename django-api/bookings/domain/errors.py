"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    NOT_FOUND = "NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INVALID_PROMO = "INVALID_PROMO"
    TRANSACTION_CONFLICT = "TRANSACTION_CONFLICT"
    INTERNAL = "INTERNAL"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class MissingFieldError(DomainError):
    """Raised when a required request field is absent or blank."""

    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_FIELD,
            message=f"Missing required field: {field}",
        )
        self.field = field


class InvalidFieldError(DomainError):
    """Raised when a request field is present but malformed."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_FIELD,
            message=message or f"Invalid {field} format",
        )
        self.field = field


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{entity} not found",
        )
        self.entity = entity
        self.entity_id = entity_id


class CapacityExceededError(DomainError):
    """Raised when a slot cannot take the requested quantity."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Not enough available capacity in this slot",
        )


class InvalidPromoError(DomainError):
    """Raised when a promo code is inactive, expired or used up."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PROMO,
            message=reason,
        )


class TransactionConflictError(DomainError):
    """Raised when a concurrent writer invalidated this attempt."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TRANSACTION_CONFLICT,
            message="The booking conflicted with another request, please retry",
        )


class InternalError(DomainError):
    """Raised on storage failure. The message never carries storage detail."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INTERNAL,
            message="An error occurred during booking, please try again later",
        )
