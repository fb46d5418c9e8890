from django.urls import path

from bookings.handlers import (
    AttendanceView,
    EventDetailView,
    EventListView,
    PaidMarkerView,
    PaymentView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/attendance",
        AttendanceView.as_view(),
        name="event-attendance",
    ),
    path(
        "events/<str:event_id>/payments",
        PaymentView.as_view(),
        name="event-payments",
    ),
    path(
        "events/<str:event_id>/attendees/<str:email>/paid",
        PaidMarkerView.as_view(),
        name="event-paid-marker",
    ),
]
