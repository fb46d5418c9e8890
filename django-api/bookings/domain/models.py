"""Domain models representing booking state.

These are pure domain objects with no storage or API concerns.
Django ORM models are in bookings/models.py (persistence layer).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Self

from bookings.domain.value_objects import DEFAULT_CAPACITY, Capacity, EventId, Level, Price


def same_email(left: str, right: str) -> bool:
    """Emails are identity keys and compare case-insensitively."""
    return left.casefold() == right.casefold()


@dataclass(frozen=True)
class Member:
    """An entry of the member directory."""

    name: str
    email: str
    level: Level = Level.BASIC


@dataclass(frozen=True)
class Attendee:
    """A member signed up for one occurrence."""

    name: str
    email: str
    signed_at: datetime
    paid_at: datetime | None = None


@dataclass(frozen=True)
class Payment:
    """One external receipt paid by a member for one occurrence."""

    email: str
    amount: int
    receipt_id: str
    paid_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Payment amount cannot be negative")

    def matches(self, other: "Payment") -> bool:
        return same_email(self.email, other.email) and self.receipt_id == other.receipt_id


@dataclass(frozen=True)
class EventRecord:
    """Booking state of one occurrence."""

    event_id: EventId
    capacity: Capacity = field(default_factory=lambda: Capacity(DEFAULT_CAPACITY))
    price: Price = field(default_factory=lambda: Price(0))
    required_level: Level = Level.BASIC
    attendees: tuple[Attendee, ...] = ()
    payments: tuple[Payment, ...] = ()

    @classmethod
    def empty(cls, event_id: EventId, default_capacity: int = DEFAULT_CAPACITY) -> Self:
        return cls(event_id=event_id, capacity=Capacity(default_capacity))

    @property
    def is_full(self) -> bool:
        return len(self.attendees) >= self.capacity.value

    @property
    def spots_left(self) -> int:
        return max(self.capacity.value - len(self.attendees), 0)

    def find_attendee(self, email: str) -> Attendee | None:
        for attendee in self.attendees:
            if same_email(attendee.email, email):
                return attendee
        return None

    def with_attendees(self, attendees: Iterable[Attendee]) -> Self:
        return replace(self, attendees=tuple(attendees))

    def sorted_by_signup(self) -> Self:
        return self.with_attendees(sorted(self.attendees, key=lambda a: a.signed_at))


@dataclass(frozen=True)
class Occurrence:
    """Read model of one dated instance of the recurring event."""

    id: EventId
    name: str
    starts_at: datetime
    location: str
    record: EventRecord

    @property
    def spots_left(self) -> int:
        return self.record.spots_left

    @property
    def is_full(self) -> bool:
        return self.record.is_full
