"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    LEVEL_TOO_LOW = "LEVEL_TOO_LOW"
    REQUIRES_PAYMENT = "REQUIRES_PAYMENT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    STORE_CONFLICT = "STORE_CONFLICT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when no occurrence matches an event key."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is not a YYYY-MM-DD date."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class MalformedRecordError(DomainError):
    """Raised when stored booking text cannot be decoded.

    The text may hide attendee or payment data, so it is never repaired.
    """

    def __init__(self, event_id: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_RECORD,
            message="Event booking data is unreadable",
        )
        self.event_id = event_id
        self.reason = reason


class LevelTooLowError(DomainError):
    """Raised when the actor's skill tier is below the event's required tier."""

    def __init__(self, required: str) -> None:
        super().__init__(
            code=ErrorCode.LEVEL_TOO_LOW,
            message=f"Event requires level {required}",
        )
        self.required = required


class RequiresPaymentError(DomainError):
    """Signals that a paid event must be paid for before joining.

    This is a control-flow signal, not a failure: callers redirect to payment.
    """

    def __init__(self, event_id: str, price: int) -> None:
        super().__init__(
            code=ErrorCode.REQUIRES_PAYMENT,
            message="Event requires payment",
        )
        self.event_id = event_id
        self.price = price


class CapacityExceededError(DomainError):
    """Raised when an occurrence has no free spots."""

    def __init__(self, capacity: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Event is full",
        )
        self.capacity = capacity


class UserNotFoundError(DomainError):
    """Raised when an email is not a recognized member or attendee."""

    def __init__(self, email: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )
        self.email = email


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot be reached. Retryable."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Event store unavailable",
        )
        self.detail = detail


class StoreConflictError(DomainError):
    """Raised when a write targets a stale version of an occurrence. Retryable."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.STORE_CONFLICT,
            message="Event was modified concurrently",
        )
        self.event_id = event_id
