from bookings.domain.models import Attendee, EventRecord, Member, Occurrence, Payment
from bookings.domain.value_objects import DEFAULT_CAPACITY, Capacity, EventId, Level, Price

__all__ = [
    "Attendee",
    "EventRecord",
    "Member",
    "Occurrence",
    "Payment",
    "EventId",
    "Level",
    "Capacity",
    "Price",
    "DEFAULT_CAPACITY",
]
