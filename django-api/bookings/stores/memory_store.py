"""In-process implementations of the store interfaces.

Used by tests and for running the service without a database.
"""

import threading
from dataclasses import replace
from datetime import datetime

from bookings.domain import EventId, Member
from bookings.domain.errors import EventNotFoundError, StoreConflictError, UserNotFoundError
from bookings.stores.interfaces import EventStore, MemberDirectory, StoreHandle, StoredOccurrence


class InMemoryEventStore(EventStore):
    """Dict-backed event store with a version counter per occurrence."""

    def __init__(self) -> None:
        self._occurrences: dict[EventId, StoredOccurrence] = {}
        self._lock = threading.Lock()
        self.writes = 0

    def add(
        self,
        starts_at: datetime,
        raw_text: str = "",
        name: str = "Training",
        location: str = "",
    ) -> StoredOccurrence:
        event_id = EventId.from_start(starts_at)
        occurrence = StoredOccurrence(
            handle=StoreHandle(key=str(event_id), version=1),
            event_id=event_id,
            name=name,
            starts_at=starts_at,
            location=location,
            raw_text=raw_text,
        )
        with self._lock:
            self._occurrences[event_id] = occurrence
        return occurrence

    def list_occurrences(self) -> list[StoredOccurrence]:
        with self._lock:
            occurrences = list(self._occurrences.values())
        return sorted(occurrences, key=lambda o: o.starts_at)

    def fetch(self, event_id: EventId) -> StoredOccurrence:
        with self._lock:
            occurrence = self._occurrences.get(event_id)
        if occurrence is None:
            raise EventNotFoundError(str(event_id))
        return occurrence

    def store(self, handle: StoreHandle, raw_text: str) -> StoreHandle:
        event_id = EventId.from_string(handle.key)
        with self._lock:
            current = self._occurrences.get(event_id)
            if current is None:
                raise EventNotFoundError(handle.key)
            if current.handle.version != handle.version:
                raise StoreConflictError(handle.key)
            new_handle = replace(handle, version=handle.version + 1)
            self._occurrences[event_id] = replace(current, handle=new_handle, raw_text=raw_text)
            self.writes += 1
        return new_handle


class InMemoryMemberDirectory(MemberDirectory):
    """Member directory backed by a dict keyed on folded email."""

    def __init__(self, members: list[Member] | None = None) -> None:
        self._members = {m.email.casefold(): m for m in members or []}

    def add(self, member: Member) -> None:
        self._members[member.email.casefold()] = member

    def resolve(self, email: str) -> Member:
        member = self._members.get(email.casefold())
        if member is None:
            raise UserNotFoundError(email)
        return member
