"""Django ORM implementation of the store interfaces."""

from django.db import DatabaseError
from django.db.models import F
from django.utils import timezone

from bookings import models
from bookings.domain import EventId, Level, Member
from bookings.domain.errors import (
    EventNotFoundError,
    StoreConflictError,
    StoreUnavailableError,
    UserNotFoundError,
)
from bookings.stores.interfaces import EventStore, MemberDirectory, StoreHandle, StoredOccurrence


class DjangoEventStore(EventStore):
    """Database-backed event store using Django ORM.

    Writes are conditional on the version read, so a write based on a stale
    read fails instead of overwriting a newer one.
    """

    def __init__(self, upcoming_limit: int = 10) -> None:
        self._upcoming_limit = upcoming_limit

    def list_occurrences(self) -> list[StoredOccurrence]:
        today = timezone.localdate()
        try:
            rows = list(
                models.Occurrence.objects.filter(event_date__gte=today).order_by("starts_at")[
                    : self._upcoming_limit
                ]
            )
        except DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        return [self._to_stored(row) for row in rows]

    def fetch(self, event_id: EventId) -> StoredOccurrence:
        try:
            row = models.Occurrence.objects.filter(event_date=event_id.value).first()
        except DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if row is None:
            raise EventNotFoundError(str(event_id))
        return self._to_stored(row)

    def store(self, handle: StoreHandle, raw_text: str) -> StoreHandle:
        try:
            updated = models.Occurrence.objects.filter(
                pk=int(handle.key), version=handle.version
            ).update(description=raw_text, version=F("version") + 1, updated_at=timezone.now())
        except DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if updated == 0:
            raise StoreConflictError(handle.key)
        return StoreHandle(key=handle.key, version=handle.version + 1)

    @staticmethod
    def _to_stored(row: models.Occurrence) -> StoredOccurrence:
        starts_at = timezone.localtime(row.starts_at)
        return StoredOccurrence(
            handle=StoreHandle(key=str(row.pk), version=row.version),
            event_id=EventId(value=row.event_date),
            name=row.name,
            starts_at=starts_at,
            location=row.location,
            raw_text=row.description,
        )


class DjangoMemberDirectory(MemberDirectory):
    """Member directory backed by the Member table."""

    def resolve(self, email: str) -> Member:
        try:
            row = models.Member.objects.filter(email__iexact=email.strip()).first()
        except DatabaseError as exc:
            raise StoreUnavailableError(str(exc)) from exc
        if row is None:
            raise UserNotFoundError(email)
        return Member(name=row.name, email=row.email, level=Level.parse(row.level))
