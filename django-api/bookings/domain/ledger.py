"""Payment ledger of one occurrence.

A member has paid for an occurrence iff a Payment with their email is in the
record's payment set. The attendee ``paid_at`` marker is an admin-only flag
and does not count as payment.
"""

from dataclasses import replace

from bookings.domain.models import EventRecord, Payment, same_email


def payments_for(record: EventRecord, email: str) -> list[Payment]:
    return [payment for payment in record.payments if same_email(payment.email, email)]


def has_paid(record: EventRecord, email: str) -> bool:
    return any(same_email(payment.email, email) for payment in record.payments)


def total_paid(record: EventRecord, email: str) -> int:
    return sum(payment.amount for payment in payments_for(record, email))


def record_payment(record: EventRecord, payment: Payment) -> EventRecord:
    """Append a payment to the ledger.

    Payments with distinct receipts are all kept. A payment whose email and
    receipt are already recorded is a redelivery and leaves the record as is.
    """
    if any(existing.matches(payment) for existing in record.payments):
        return record
    return replace(record, payments=record.payments + (payment,))
