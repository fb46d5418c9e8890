"""Admission control by skill tier."""

from bookings.domain.errors import LevelTooLowError
from bookings.domain.models import EventRecord, Member


def is_eligible(actor: Member, record: EventRecord) -> bool:
    """Return True when the actor's tier reaches the event's required tier."""
    return actor.level >= record.required_level


def ensure_eligible(actor: Member, record: EventRecord) -> None:
    """Raise LevelTooLowError unless the actor may take part in the event.

    Callers must pass the record read in the same operation, never a cached one.
    """
    if not is_eligible(actor, record):
        raise LevelTooLowError(record.required_level.name)
