"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging
from collections.abc import Mapping
from typing import Any

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from tutoring.domain import Principal, Role
from tutoring.domain.errors import (
    DomainError,
    ErrorCode,
    ForbiddenError,
    InvalidPayloadError,
    SessionValidationError,
)
from tutoring.handlers.principal import principal_from_request
from tutoring.handlers.serializers import (
    BookingSerializer,
    SessionSerializer,
    VolunteerStatsSerializer,
)
from tutoring.services.availability_service import AvailabilityService
from tutoring.services.booking_service import BookingService
from tutoring.services.session_service import SessionService
from tutoring.stores.django_store import DjangoTutoringStore

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_FULL: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_BOOKED: status.HTTP_409_CONFLICT,
}


def session_service() -> SessionService:
    return SessionService(DjangoTutoringStore(), tz=timezone.get_current_timezone())


def booking_service() -> BookingService:
    return BookingService(DjangoTutoringStore())


def availability_service() -> AvailabilityService:
    return AvailabilityService(DjangoTutoringStore())


class TutoringAPIView(APIView):
    """Base view: resolves the principal and maps domain errors."""

    permission_classes = [IsAuthenticated]

    def principal(self, request: Request) -> Principal:
        principal = principal_from_request(request)
        if principal is None:
            raise ForbiddenError("A student or volunteer account is required")
        return principal

    def body(self, request: Request) -> Mapping[str, Any]:
        if not isinstance(request.data, Mapping):
            raise InvalidPayloadError(type(request.data).__name__)
        return request.data

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            logger.info(
                "%s %s rejected: %s", self.request.method, self.request.path, exc
            )
            body = {"code": exc.code.value, "message": exc.message}
            if isinstance(exc, SessionValidationError):
                body["errors"] = exc.errors
            return Response(body, status=STATUS_BY_CODE[exc.code])
        return super().handle_exception(exc)


class SessionListView(TutoringAPIView):
    """Handler for GET/POST /api/sessions"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request) -> Response:
        sessions = availability_service().list_available_sessions(
            principal_from_request(request),
            search=request.query_params.get("search") or None,
            subject=request.query_params.get("subject") or None,
        )
        return Response(SessionSerializer(sessions, many=True).data)

    def post(self, request: Request) -> Response:
        session = session_service().create_session(
            self.principal(request), self.body(request)
        )
        return Response(
            SessionSerializer(session).data, status=status.HTTP_201_CREATED
        )


class MySessionListView(TutoringAPIView):
    """Handler for GET /api/sessions/my"""

    def get(self, request: Request) -> Response:
        principal = self.principal(request)
        principal.require(Role.VOLUNTEER, "Only volunteers can view their sessions")
        sessions = availability_service().list_sessions_by_volunteer(principal.user_id)
        return Response(SessionSerializer(sessions, many=True).data)


class SessionDetailView(TutoringAPIView):
    """Handler for GET/PUT/PATCH/DELETE /api/sessions/{session_id}"""

    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request: Request, session_id: str) -> Response:
        session = session_service().get_session(session_id)
        return Response(SessionSerializer(session).data)

    def put(self, request: Request, session_id: str) -> Response:
        session = session_service().update_session(
            self.principal(request), session_id, self.body(request)
        )
        return Response(SessionSerializer(session).data)

    patch = put

    def delete(self, request: Request, session_id: str) -> Response:
        session_service().delete_session(self.principal(request), session_id)
        return Response({"message": "Session deleted successfully"})


class SessionBookingListView(TutoringAPIView):
    """Handler for GET /api/sessions/{session_id}/bookings"""

    def get(self, request: Request, session_id: str) -> Response:
        bookings = availability_service().list_bookings_by_session(
            self.principal(request), session_id
        )
        return Response(BookingSerializer(bookings, many=True).data)


class BookingListView(TutoringAPIView):
    """Handler for POST /api/bookings"""

    def post(self, request: Request) -> Response:
        booking = booking_service().create_booking(
            self.principal(request), self.body(request).get("session_id")
        )
        return Response(
            BookingSerializer(booking).data, status=status.HTTP_201_CREATED
        )


class MyBookingListView(TutoringAPIView):
    """Handler for GET /api/bookings/my"""

    def get(self, request: Request) -> Response:
        principal = self.principal(request)
        principal.require(Role.STUDENT, "Only students can view their bookings")
        bookings = availability_service().list_bookings_by_student(principal.user_id)
        return Response(BookingSerializer(bookings, many=True).data)


class BookingCancelView(TutoringAPIView):
    """Handler for PUT /api/bookings/{booking_id}/cancel"""

    def put(self, request: Request, booking_id: str) -> Response:
        booking_service().cancel_booking(self.principal(request), booking_id)
        return Response({"message": "Booking cancelled successfully"})


class VolunteerStatsView(TutoringAPIView):
    """Handler for GET /api/volunteer/stats"""

    def get(self, request: Request) -> Response:
        principal = self.principal(request)
        principal.require(Role.VOLUNTEER, "Only volunteers can view stats")
        stats = availability_service().volunteer_stats(principal.user_id)
        return Response(VolunteerStatsSerializer(stats).data)
