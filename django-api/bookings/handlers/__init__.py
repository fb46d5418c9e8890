from bookings.handlers.views import (
    AttendanceView,
    EventDetailView,
    EventListView,
    PaidMarkerView,
    PaymentView,
)

__all__ = [
    "AttendanceView",
    "EventDetailView",
    "EventListView",
    "PaidMarkerView",
    "PaymentView",
]
