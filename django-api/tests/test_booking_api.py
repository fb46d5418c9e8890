"""Integration tests for the booking API.

Exercise the views, service and Django store together.
Run with: pytest tests/test_booking_api.py -v
"""

from datetime import UTC, datetime

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bookings.domain import Capacity, EventId, EventRecord, Level, Price
from bookings.domain.codec import decode, encode
from bookings.models import Member, Occurrence

EVENT_ID = EventId.from_string("2030-05-01")
STARTS_AT = datetime(2030, 5, 1, 16, 0, tzinfo=UTC)


def create_event(**fields) -> Occurrence:
    return Occurrence.objects.create(
        name="Footvolley",
        starts_at=STARTS_AT,
        location="Beach court",
        description=encode(EventRecord(event_id=EVENT_ID, **fields)),
    )


def stored_record() -> EventRecord:
    return decode(Occurrence.objects.get(event_date=EVENT_ID.value).description, EVENT_ID)


def login(client: APIClient, email: str, level: str = "BASIC", staff: bool = False) -> None:
    name = email.split("@")[0].title()
    user = get_user_model().objects.create_user(username=name, email=email, is_staff=staff)
    Member.objects.create(name=name, email=email, level=level)
    client.force_authenticate(user=user)


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_requires_authentication(self, api_client: APIClient):
        """Anonymous requests are refused."""
        assert api_client.get("/api/events").status_code in (401, 403)

    def test_list_events(self, api_client: APIClient):
        """Given events exist, returns them with booking state."""
        create_event(price=Price(100), required_level=Level.MEDIUM, capacity=Capacity(8))
        login(api_client, "alice@example.com")
        response = api_client.get("/api/events")
        assert response.status_code == 200
        (event,) = response.json()
        assert event["id"] == "2030-05-01"
        assert event["price"] == 100
        assert event["level"] == "MEDIUM"
        assert event["max_participants"] == 8
        assert event["spots_left"] == 8
        assert event["attendees"] == []

    def test_list_events_empty(self, api_client: APIClient):
        """Given no events, returns an empty list."""
        login(api_client, "alice@example.com")
        assert api_client.get("/api/events").json() == []


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event(self, api_client: APIClient):
        """Given the event exists, returns its details."""
        create_event()
        login(api_client, "alice@example.com")
        response = api_client.get("/api/events/2030-05-01")
        assert response.status_code == 200
        assert response.json()["location"] == "Beach court"

    def test_get_event_not_found(self, api_client: APIClient):
        """Given no event on that date, returns 404."""
        login(api_client, "alice@example.com")
        response = api_client.get("/api/events/2030-05-02")
        assert response.status_code == 404
        assert response.json()["code"] == "EVENT_NOT_FOUND"

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        """Given a key that is not a date, returns 400."""
        login(api_client, "alice@example.com")
        assert api_client.get("/api/events/tomorrow").status_code == 400

    def test_get_event_malformed_record(self, api_client: APIClient):
        """Unreadable booking text is a server error without internals."""
        Occurrence.objects.create(name="Footvolley", starts_at=STARTS_AT, description="attendes: [oops")
        login(api_client, "alice@example.com")
        response = api_client.get("/api/events/2030-05-01")
        assert response.status_code == 500
        assert response.json() == {
            "code": "MALFORMED_RECORD",
            "message": "Event booking data is unreadable",
        }


@pytest.mark.django_db
class TestAttendance:
    """Tests for POST and DELETE /api/events/{id}/attendance"""

    def test_join(self, api_client: APIClient):
        """A member joins and is stored as attendee."""
        create_event()
        login(api_client, "alice@example.com")
        response = api_client.post("/api/events/2030-05-01/attendance")
        assert response.status_code == 201
        assert [a["email"] for a in response.json()["attendees"]] == ["alice@example.com"]
        assert stored_record().find_attendee("alice@example.com") is not None

    def test_join_not_a_member(self, api_client: APIClient):
        """Users missing from the member directory get 404."""
        create_event()
        user = get_user_model().objects.create_user(username="eve", email="eve@example.com")
        api_client.force_authenticate(user=user)
        response = api_client.post("/api/events/2030-05-01/attendance")
        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    def test_join_level_too_low(self, api_client: APIClient):
        """A Basic member is refused from an Advanced event."""
        create_event(required_level=Level.ADVANCED)
        login(api_client, "alice@example.com")
        response = api_client.post("/api/events/2030-05-01/attendance")
        assert response.status_code == 403
        assert response.json()["code"] == "LEVEL_TOO_LOW"

    def test_join_paid_event(self, api_client: APIClient):
        """An unpaid join of a paid event asks for payment."""
        create_event(price=Price(100))
        login(api_client, "alice@example.com")
        response = api_client.post("/api/events/2030-05-01/attendance")
        assert response.status_code == 402
        assert response.json()["price"] == 100
        assert response.json()["event_id"] == "2030-05-01"

    def test_join_full_event(self, api_client: APIClient):
        """A full event answers 409 and keeps its attendees."""
        create_event(capacity=Capacity(1))
        first = APIClient()
        login(first, "bob@example.com")
        assert first.post("/api/events/2030-05-01/attendance").status_code == 201
        login(api_client, "alice@example.com")
        response = api_client.post("/api/events/2030-05-01/attendance")
        assert response.status_code == 409
        assert response.json()["code"] == "CAPACITY_EXCEEDED"
        assert [a.email for a in stored_record().attendees] == ["bob@example.com"]

    def test_leave(self, api_client: APIClient):
        """Leaving removes the member; leaving again is harmless."""
        create_event()
        login(api_client, "alice@example.com")
        api_client.post("/api/events/2030-05-01/attendance")
        assert api_client.delete("/api/events/2030-05-01/attendance").status_code == 200
        second = api_client.delete("/api/events/2030-05-01/attendance")
        assert second.status_code == 200
        assert second.json()["attendees"] == []


@pytest.mark.django_db
class TestPayments:
    """Tests for the staff payment endpoints."""

    def test_members_cannot_record_payments(self, api_client: APIClient):
        """Non-staff users are forbidden."""
        create_event(price=Price(100))
        login(api_client, "alice@example.com")
        response = api_client.post(
            "/api/events/2030-05-01/payments",
            {"email": "alice@example.com", "amount": 100, "receipt_id": "cs_1"},
            format="json",
        )
        assert response.status_code == 403

    def test_record_payment_seats_payer(self, api_client: APIClient):
        """A recorded payment seats the payer, and a replay changes nothing."""
        create_event(price=Price(100))
        Member.objects.create(name="Alice", email="alice@example.com", level="BASIC")
        login(api_client, "admin@example.com", staff=True)
        payload = {"email": "alice@example.com", "amount": 100, "receipt_id": "cs_1"}

        response = api_client.post("/api/events/2030-05-01/payments", payload, format="json")
        assert response.status_code == 201
        body = response.json()
        assert body["seated"] is True
        assert body["reason"] is None
        assert [p["receipt_id"] for p in body["event"]["payments"]] == ["cs_1"]

        api_client.post("/api/events/2030-05-01/payments", payload, format="json")
        assert len(stored_record().payments) == 1
        assert Occurrence.objects.get().version == 2

    def test_record_payment_validates_input(self, api_client: APIClient):
        """Negative amounts are rejected before reaching the service."""
        create_event()
        login(api_client, "admin@example.com", staff=True)
        response = api_client.post(
            "/api/events/2030-05-01/payments",
            {"email": "alice@example.com", "amount": -1, "receipt_id": "cs_1"},
            format="json",
        )
        assert response.status_code == 400

    def test_toggle_paid_marker(self, api_client: APIClient):
        """Staff can flip the legacy paid marker of an attendee."""
        create_event()
        member = APIClient()
        login(member, "alice@example.com")
        member.post("/api/events/2030-05-01/attendance")
        login(api_client, "admin@example.com", staff=True)

        response = api_client.post("/api/events/2030-05-01/attendees/alice@example.com/paid")
        assert response.status_code == 200
        assert response.json()["attendees"][0]["paid_at"] is not None

        missing = api_client.post("/api/events/2030-05-01/attendees/bob@example.com/paid")
        assert missing.status_code == 404
