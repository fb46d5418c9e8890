"""Conversion between EventRecord and the text stored in an occurrence.

The text lives in a free-text field that organizers can also edit by hand in
the backing UI, so it is sanitized before it reaches the YAML parser:

    price: 100
    level: MEDIUM
    max_participants: 12
    attendes:
    - name: Alice
      email: alice@example.com
      sign_time: '2024-05-01T18:00:00+00:00'
      paid_time: null
    payments:
    - email: alice@example.com
      amount: 100
      receipt: cs_test_123
      paid_timestamp: '2024-05-01T17:59:00+00:00'
"""

import html
import re
from datetime import UTC, datetime
from typing import Any

import yaml
from django.utils.dateparse import parse_datetime
from django.utils.html import strip_tags

from bookings.domain.errors import MalformedRecordError
from bookings.domain.models import Attendee, EventRecord, Payment
from bookings.domain.value_objects import DEFAULT_CAPACITY, Capacity, EventId, Level, Price

# "attendes" is the spelling already present in stored entries.
ATTENDEES_KEY = "attendes"
ATTENDEES_ALIASES = (ATTENDEES_KEY, "attendees")

_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)


def sanitize(raw_text: str) -> str:
    """Turn UI markup into plain text with no tags left in it.

    Character entities are kept; string fields are unescaped one by one after
    parsing, so escaped markup never reaches the parser as markup.
    """
    text = _LINE_BREAK.sub("\n", raw_text)
    text = text.replace("&nbsp;", " ")
    return strip_tags(text)


def decode(
    raw_text: str | None,
    event_id: EventId,
    default_capacity: int = DEFAULT_CAPACITY,
) -> EventRecord:
    """Parse stored text into an EventRecord.

    Empty text yields the zero-value record. Attendees come back sorted by
    signup time regardless of their order in the text.

    Raises:
        MalformedRecordError: If the text is not a readable booking document.
    """
    key = str(event_id)
    if raw_text is None or not raw_text.strip():
        return EventRecord.empty(event_id, default_capacity)

    try:
        document = yaml.safe_load(sanitize(raw_text))
    except yaml.YAMLError as exc:
        raise MalformedRecordError(key, f"invalid YAML: {exc}") from exc

    if document is None:
        return EventRecord.empty(event_id, default_capacity)
    if not isinstance(document, dict):
        raise MalformedRecordError(key, "document is not a mapping")

    try:
        capacity = _as_int(document.get("max_participants"), "max_participants") or default_capacity
        record = EventRecord(
            event_id=event_id,
            capacity=Capacity(capacity),
            price=Price(_as_int(document.get("price"), "price")),
            required_level=Level.parse(document.get("level")),
            attendees=tuple(_attendee(item) for item in _entries(document, ATTENDEES_ALIASES)),
            payments=tuple(_payment(item) for item in _entries(document, ("payments",))),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedRecordError(key, str(exc)) from exc

    return record.sorted_by_signup()


def encode(record: EventRecord) -> str:
    """Serialize an EventRecord; equal records always give identical text.

    String fields are HTML-escaped so that decoding restores them exactly.
    """
    document = {
        "price": record.price.amount,
        "level": record.required_level.name,
        "max_participants": record.capacity.value,
        ATTENDEES_KEY: [
            {
                "name": html.escape(attendee.name),
                "email": html.escape(attendee.email),
                "sign_time": _timestamp(attendee.signed_at),
                "paid_time": _timestamp(attendee.paid_at),
            }
            for attendee in record.sorted_by_signup().attendees
        ],
        "payments": [
            {
                "email": html.escape(payment.email),
                "amount": payment.amount,
                "receipt": html.escape(payment.receipt_id),
                "paid_timestamp": _timestamp(payment.paid_at),
            }
            for payment in record.payments
        ],
    }
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, default_flow_style=False)


def _entries(document: dict, keys: tuple[str, ...]) -> list[dict]:
    for key in keys:
        if document.get(key) is not None:
            value = document[key]
            break
    else:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise TypeError(f"'{keys[0]}' must be a list of mappings")
    return value


def _attendee(item: dict) -> Attendee:
    signed_at = _as_datetime(item.get("sign_time"), "sign_time")
    if signed_at is None:
        raise KeyError("attendee is missing 'sign_time'")
    return Attendee(
        name=html.unescape(str(item.get("name") or "")),
        email=_required_str(item, "email"),
        signed_at=signed_at,
        paid_at=_as_datetime(item.get("paid_time"), "paid_time"),
    )


def _payment(item: dict) -> Payment:
    return Payment(
        email=_required_str(item, "email"),
        amount=_as_int(item.get("amount"), "amount"),
        receipt_id=html.unescape(str(item.get("receipt") or "")),
        paid_at=_as_datetime(item.get("paid_timestamp"), "paid_timestamp"),
    )


def _required_str(item: dict, field: str) -> str:
    value = item.get(field)
    if not isinstance(value, str) or not value.strip():
        raise KeyError(f"entry is missing '{field}'")
    return html.unescape(value.strip())


def _as_int(value: Any, field: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"'{field}' must be an integer")
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{field}' must be an integer") from None


def _as_datetime(value: Any, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = parse_datetime(value.strip())
        if parsed is None:
            raise ValueError(f"'{field}' is not a timestamp")
    else:
        raise TypeError(f"'{field}' is not a timestamp")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
