"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.domain.errors import DomainError, ErrorCode, RequiresPaymentError
from bookings.handlers.serializers import (
    LedgerSerializer,
    OccurrenceSerializer,
    PaymentInputSerializer,
)
from bookings.services import AttendanceService, get_attendance_service

ERROR_STATUS = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REQUIRES_PAYMENT: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.LEVEL_TOO_LOW: status.HTTP_403_FORBIDDEN,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.STORE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.MALFORMED_RECORD: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message}
    if isinstance(exc, RequiresPaymentError):
        body["event_id"] = exc.event_id
        body["price"] = exc.price
    return Response(body, status=ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR))


class BookingView(APIView):
    """Base view: resolves the service and renders domain errors."""

    def get_service(self) -> AttendanceService:
        return get_attendance_service()

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            return error_response(exc)
        return super().handle_exception(exc)


class EventListView(BookingView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        events = self.get_service().list_events()
        return Response(OccurrenceSerializer(events, many=True).data)


class EventDetailView(BookingView):
    """Handler for GET /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.get_service().get_event(event_id)
        return Response(OccurrenceSerializer(event).data)


class AttendanceView(BookingView):
    """Handler for POST and DELETE /api/events/{event_id}/attendance"""

    def post(self, request: Request, event_id: str) -> Response:
        service = self.get_service()
        actor = service.member(request.user.email)
        event = service.join(event_id, actor)
        return Response(OccurrenceSerializer(event).data, status=status.HTTP_201_CREATED)

    def delete(self, request: Request, event_id: str) -> Response:
        service = self.get_service()
        actor = service.member(request.user.email)
        event = service.leave(event_id, actor)
        return Response(OccurrenceSerializer(event).data)


class PaymentView(BookingView):
    """Handler for POST /api/events/{event_id}/payments (staff only)"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, event_id: str) -> Response:
        payload = PaymentInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = self.get_service().record_payment(
            event_id,
            email=payload.validated_data["email"],
            amount=payload.validated_data["amount"],
            receipt_id=payload.validated_data["receipt_id"],
            name=payload.validated_data.get("name"),
        )
        body = {
            "event": LedgerSerializer(result.occurrence).data,
            "seated": result.seated,
            "reason": result.reason.code.value if result.reason else None,
        }
        return Response(body, status=status.HTTP_201_CREATED)


class PaidMarkerView(BookingView):
    """Handler for POST /api/events/{event_id}/attendees/{email}/paid (staff only)"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, event_id: str, email: str) -> Response:
        event = self.get_service().toggle_paid(event_id, email)
        return Response(LedgerSerializer(event).data)
