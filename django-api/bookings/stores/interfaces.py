"""Store interfaces (repository pattern).

Stores must be swappable. The event store only moves the booking text of an
occurrence; decoding it into an EventRecord is the codec's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from bookings.domain import EventId, Member


@dataclass(frozen=True)
class StoreHandle:
    """Opaque identity and version of a stored occurrence."""

    key: str
    version: int


@dataclass(frozen=True)
class StoredOccurrence:
    """One occurrence as read from the backing store."""

    handle: StoreHandle
    event_id: EventId
    name: str
    starts_at: datetime
    location: str
    raw_text: str


class EventStore(ABC):
    """Interface for reading and replacing occurrence booking text."""

    @abstractmethod
    def list_occurrences(self) -> list[StoredOccurrence]:
        """Return upcoming occurrences ordered by starts_at ascending.

        Raises:
            StoreUnavailableError: On transport failure.
        """
        ...

    @abstractmethod
    def fetch(self, event_id: EventId) -> StoredOccurrence:
        """Return the occurrence for an event key.

        Raises:
            EventNotFoundError: If no occurrence matches the key.
            StoreUnavailableError: On transport failure.
        """
        ...

    @abstractmethod
    def store(self, handle: StoreHandle, raw_text: str) -> StoreHandle:
        """Replace the booking text of the occurrence behind *handle*.

        Returns the handle of the new version.

        Raises:
            StoreConflictError: If *handle* is stale.
            StoreUnavailableError: On transport failure.
        """
        ...


class MemberDirectory(ABC):
    """Interface for resolving members by email."""

    @abstractmethod
    def resolve(self, email: str) -> Member:
        """Return the member with this email, compared case-insensitively.

        Raises:
            UserNotFoundError: If the email is not a member.
        """
        ...
