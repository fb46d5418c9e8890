from bookings.stores.interfaces import EventStore, MemberDirectory, StoreHandle, StoredOccurrence
from bookings.stores.memory_store import InMemoryEventStore, InMemoryMemberDirectory

__all__ = [
    "EventStore",
    "MemberDirectory",
    "StoreHandle",
    "StoredOccurrence",
    "InMemoryEventStore",
    "InMemoryMemberDirectory",
]
