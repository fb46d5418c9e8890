"""Attendance transitions for one (occurrence, member) pair.

Each function takes the current record and returns the next one; nothing here
touches storage. Repeating a join or leave against a record that already
reflects it returns that record unchanged.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from bookings.domain import ledger
from bookings.domain.errors import (
    CapacityExceededError,
    DomainError,
    LevelTooLowError,
    RequiresPaymentError,
    UserNotFoundError,
)
from bookings.domain.models import Attendee, EventRecord, Member, Payment, same_email
from bookings.domain.policy import ensure_eligible


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of applying a provider payment to a record."""

    record: EventRecord
    seated: bool
    reason: DomainError | None = None


def join(record: EventRecord, actor: Member, now: datetime) -> EventRecord:
    """Sign the actor up.

    A payment proof that must be kept even when the seat is refused goes
    through apply_payment instead.

    Raises:
        LevelTooLowError: If the actor's tier is below the required tier.
        CapacityExceededError: If every spot is taken.
        RequiresPaymentError: If the event is paid and the actor has no
            payment on record.
    """
    ensure_eligible(actor, record)
    existing = record.find_attendee(actor.email)
    if existing is not None:
        if actor.name and existing.name != actor.name:
            return _replace_attendee(record, replace(existing, name=actor.name))
        return record

    if record.is_full:
        raise CapacityExceededError(record.capacity.value)
    if not record.price.is_free and not ledger.has_paid(record, actor.email):
        raise RequiresPaymentError(str(record.event_id), record.price.amount)

    attendee = Attendee(name=actor.name, email=actor.email, signed_at=now)
    return record.with_attendees(record.attendees + (attendee,))


def leave(record: EventRecord, actor: Member) -> EventRecord:
    """Remove the actor; leaving an event one is not in changes nothing.

    Raises:
        LevelTooLowError: If the actor's tier is below the required tier.
    """
    ensure_eligible(actor, record)
    remaining = [a for a in record.attendees if not same_email(a.email, actor.email)]
    if len(remaining) == len(record.attendees):
        return record
    return record.with_attendees(remaining)


def apply_payment(
    record: EventRecord,
    member: Member,
    payment: Payment,
    now: datetime,
) -> PaymentOutcome:
    """Record a provider payment and seat the payer when possible.

    The payment is always kept. The payer is seated only if eligible and a
    spot is free; otherwise the outcome carries the rejection.
    """
    record = ledger.record_payment(record, payment)
    try:
        seated = join(record, member, now)
    except (LevelTooLowError, CapacityExceededError) as exc:
        return PaymentOutcome(record=record, seated=False, reason=exc)
    return PaymentOutcome(record=seated, seated=True)


def toggle_paid(record: EventRecord, email: str, now: datetime) -> EventRecord:
    """Flip the legacy paid marker of an attendee.

    Raises:
        UserNotFoundError: If no attendee has this email.
    """
    attendee = record.find_attendee(email)
    if attendee is None:
        raise UserNotFoundError(email)
    paid_at = now if attendee.paid_at is None else None
    return _replace_attendee(record, replace(attendee, paid_at=paid_at))


def _replace_attendee(record: EventRecord, updated: Attendee) -> EventRecord:
    return record.with_attendees(
        updated if same_email(a.email, updated.email) else a for a in record.attendees
    )
