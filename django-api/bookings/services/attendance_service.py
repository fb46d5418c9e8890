"""Attendance service - all business orchestration lives here.

Services:
- Depend only on interfaces (stores, member directory)
- Run every mutation as fetch, decode, change, encode, write under the
  event's lock, re-checking rules against the record just fetched
- Perform orchestration and error mapping
- Return domain models or raise domain errors
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from bookings.domain import DEFAULT_CAPACITY, EventId, EventRecord, Member, Occurrence, Payment
from bookings.domain import attendance, codec
from bookings.domain.errors import (
    CapacityExceededError,
    DomainError,
    InvalidEventIdError,
    LevelTooLowError,
    MalformedRecordError,
    RequiresPaymentError,
    StoreConflictError,
    StoreUnavailableError,
    UserNotFoundError,
)
from bookings.services.locks import KeyedLocks
from bookings.stores.interfaces import EventStore, MemberDirectory, StoredOccurrence

REJECTIONS = (LevelTooLowError, CapacityExceededError, RequiresPaymentError, UserNotFoundError)


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of recording a provider payment."""

    occurrence: Occurrence
    seated: bool
    reason: DomainError | None = None


class AttendanceService:
    """Service for viewing occurrences and changing who attends them."""

    def __init__(
        self,
        store: EventStore,
        directory: MemberDirectory,
        *,
        locks: KeyedLocks | None = None,
        clock: Callable[[], datetime] = timezone.now,
        logger: logging.Logger | None = None,
        default_capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        self._store = store
        self._directory = directory
        self._locks = locks or KeyedLocks()
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._default_capacity = default_capacity

    def member(self, email: str) -> Member:
        """Resolve an email to a member; raises UserNotFoundError."""
        return self._directory.resolve(email)

    def list_events(self) -> list[Occurrence]:
        """Return upcoming occurrences with their booking state."""
        return [
            self._to_occurrence(stored, self._decode(stored))
            for stored in self._store.list_occurrences()
        ]

    def get_event(self, event_id: str) -> Occurrence:
        """Return one occurrence by its YYYY-MM-DD key.

        Raises:
            InvalidEventIdError: If the event_id is not a date.
            EventNotFoundError: If no occurrence falls on that date.
            MalformedRecordError: If the stored booking text is unreadable.
        """
        stored = self._store.fetch(self._parse_id(event_id))
        return self._to_occurrence(stored, self._decode(stored))

    def join(self, event_id: str, actor: Member, payment: Payment | None = None) -> Occurrence:
        """Sign the actor up for an occurrence.

        A payment proof is saved even when the seat is then refused.

        Raises:
            LevelTooLowError, CapacityExceededError, RequiresPaymentError,
            plus the errors of get_event and of the store write.
        """
        now = self._clock()
        if payment is not None:
            result = self._apply_payment(event_id, "join", actor, payment, now)
            if not result.seated:
                raise result.reason
            return result.occurrence
        return self._mutate(
            event_id,
            "join",
            actor.email,
            lambda record: attendance.join(record, actor, now),
        )

    def leave(self, event_id: str, actor: Member) -> Occurrence:
        """Remove the actor from an occurrence; absent actors are a no-op."""
        return self._mutate(
            event_id,
            "leave",
            actor.email,
            lambda record: attendance.leave(record, actor),
        )

    def record_payment(
        self,
        event_id: str,
        email: str,
        amount: int,
        receipt_id: str,
        name: str | None = None,
    ) -> PaymentResult:
        """Record a payment reported by the payment provider.

        Safe to replay: a payment already recorded under the same receipt
        changes nothing. The payer is seated when eligible and a spot is free.

        Raises:
            UserNotFoundError: If the email is not a member.
            plus the errors of get_event and of the store write.
        """
        member = self._directory.resolve(email)
        if name:
            member = Member(name=name, email=member.email, level=member.level)
        now = self._clock()
        payment = Payment(email=member.email, amount=amount, receipt_id=receipt_id, paid_at=now)
        return self._apply_payment(event_id, "payment", member, payment, now)

    def toggle_paid(self, event_id: str, email: str) -> Occurrence:
        """Flip the legacy paid marker of an attendee (admin action).

        Raises:
            UserNotFoundError: If the email is not an attendee of the event.
        """
        now = self._clock()
        return self._mutate(
            event_id,
            "toggle_paid",
            email,
            lambda record: attendance.toggle_paid(record, email, now),
        )

    def _apply_payment(
        self,
        event_id: str,
        action: str,
        member: Member,
        payment: Payment,
        now: datetime,
    ) -> PaymentResult:
        outcomes: list[attendance.PaymentOutcome] = []

        def change(record: EventRecord) -> EventRecord:
            outcome = attendance.apply_payment(record, member, payment, now)
            outcomes.append(outcome)
            return outcome.record

        occurrence = self._mutate(event_id, action, member.email, change)
        outcome = outcomes[-1]
        if not outcome.seated:
            self._logger.warning(
                "payment recorded without a seat",
                extra={"event_id": event_id, "email": member.email, "reason": str(outcome.reason)},
            )
        return PaymentResult(occurrence=occurrence, seated=outcome.seated, reason=outcome.reason)

    def _mutate(
        self,
        event_id: str,
        action: str,
        email: str,
        change: Callable[[EventRecord], EventRecord],
    ) -> Occurrence:
        key = self._parse_id(event_id)
        context = {"event_id": str(key), "email": email, "action": action}
        with self._locks.hold(key):
            stored = self._store.fetch(key)
            record = self._decode(stored)
            try:
                updated = change(record)
            except REJECTIONS as exc:
                self._logger.info("%s rejected: %s", action, exc.code.value, extra=context)
                raise
            if updated == record:
                self._logger.debug("%s changed nothing", action, extra=context)
                return self._to_occurrence(stored, record)
            try:
                self._store.store(stored.handle, codec.encode(updated))
            except (StoreConflictError, StoreUnavailableError) as exc:
                self._logger.warning("%s not saved: %s", action, exc.code.value, extra=context)
                raise
        self._logger.info("%s saved", action, extra=context)
        return self._to_occurrence(stored, updated)

    def _decode(self, stored: StoredOccurrence) -> EventRecord:
        try:
            return codec.decode(stored.raw_text, stored.event_id, self._default_capacity)
        except MalformedRecordError as exc:
            self._logger.error(
                "unreadable booking data",
                extra={"event_id": str(stored.event_id), "reason": exc.reason},
            )
            raise

    @staticmethod
    def _parse_id(event_id: str) -> EventId:
        try:
            return EventId.from_string(event_id)
        except (TypeError, ValueError) as exc:
            raise InvalidEventIdError() from exc

    @staticmethod
    def _to_occurrence(stored: StoredOccurrence, record: EventRecord) -> Occurrence:
        return Occurrence(
            id=stored.event_id,
            name=stored.name,
            starts_at=stored.starts_at,
            location=stored.location,
            record=record,
        )
