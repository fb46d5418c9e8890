"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime, timedelta

import pytest
from rest_framework.test import APIClient

from bookings.domain import EventId, Level, Member
from bookings.services import AttendanceService, get_attendance_service
from bookings.stores import InMemoryEventStore, InMemoryMemberDirectory

EVENT_KEY = "2030-05-01"


class FixedClock:
    """Clock returning a settable instant, advanced one minute per call."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(minutes=1)
        return value


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def fresh_service():
    get_attendance_service.cache_clear()
    yield
    get_attendance_service.cache_clear()


@pytest.fixture
def event_id() -> EventId:
    return EventId.from_string(EVENT_KEY)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2030, 4, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def alice() -> Member:
    return Member(name="Alice", email="alice@example.com", level=Level.BASIC)


@pytest.fixture
def bob() -> Member:
    return Member(name="Bob", email="bob@example.com", level=Level.MEDIUM)


@pytest.fixture
def carol() -> Member:
    return Member(name="Carol", email="carol@example.com", level=Level.ADVANCED)


@pytest.fixture
def directory(alice: Member, bob: Member, carol: Member) -> InMemoryMemberDirectory:
    return InMemoryMemberDirectory([alice, bob, carol])


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def service(
    store: InMemoryEventStore,
    directory: InMemoryMemberDirectory,
    clock: FixedClock,
) -> AttendanceService:
    return AttendanceService(store, directory, clock=clock)
