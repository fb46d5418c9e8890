from functools import lru_cache

from django.conf import settings

from bookings.services.attendance_service import AttendanceService, PaymentResult
from bookings.services.locks import KeyedLocks

__all__ = ["AttendanceService", "KeyedLocks", "PaymentResult", "get_attendance_service"]


@lru_cache(maxsize=1)
def get_attendance_service() -> AttendanceService:
    """Return the process-wide service, so all requests share one lock registry."""
    from bookings.stores.django_store import DjangoEventStore, DjangoMemberDirectory

    return AttendanceService(
        DjangoEventStore(upcoming_limit=settings.BOOKINGS_UPCOMING_LIMIT),
        DjangoMemberDirectory(),
        default_capacity=settings.BOOKINGS_DEFAULT_CAPACITY,
    )
