"""Per-event critical sections within one serving process."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from bookings.domain import EventId


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    """One mutex per event id, created on demand.

    An entry is dropped once no thread holds or waits on it, so the registry
    only grows with the number of events being mutated at the same time.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[EventId, _Entry] = {}

    @contextmanager
    def hold(self, event_id: EventId) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(event_id, _Entry())
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[event_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
