"""Read-only views over sessions and bookings."""

from uuid import UUID

from tutoring.domain import (
    Booking,
    Principal,
    Session,
    SessionId,
    UserId,
    VolunteerStats,
)
from tutoring.domain.errors import ForbiddenError, SessionNotFoundError
from tutoring.services.common import Clock, parse_id, utc_now
from tutoring.stores.interfaces import TutoringStore


class AvailabilityService:
    """Service for browsing sessions, listing bookings and volunteer stats."""

    def __init__(self, store: TutoringStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def list_available_sessions(
        self,
        principal: Principal | None = None,
        search: str | None = None,
        subject: str | None = None,
    ) -> list[Session]:
        """Return bookable sessions, soonest first.

        A session is bookable when it is active, starts in the future and has
        a free seat. For a student, sessions they already booked are left out.
        """
        now = self._clock()
        booked: set[SessionId] = set()
        if principal is not None and principal.is_student:
            booked = self._store.booked_session_ids(principal.user_id)
        return [
            session
            for session in self._store.list_open_sessions(now)
            if session.is_open_at(now)
            and session.id not in booked
            and session.matches(search=search, subject=subject)
        ]

    def list_sessions_by_volunteer(self, volunteer_id: UserId) -> list[Session]:
        """Return a volunteer's active sessions, newest first."""
        return self._store.list_sessions_by_volunteer(volunteer_id)

    def list_bookings_by_student(self, student_id: UserId) -> list[Booking]:
        """Return the student's active bookings on sessions that still exist."""
        return self._store.list_bookings_by_student(student_id)

    def list_bookings_by_session(
        self, principal: Principal, session_id: str | UUID
    ) -> list[Booking]:
        """Return who booked a session. Only its volunteer may ask.

        Raises:
            InvalidIdError: If session_id is not a valid UUID.
            SessionNotFoundError: If the session is missing or soft-deleted.
            ForbiddenError: If the caller does not own the session.
        """
        sid = parse_id(SessionId, session_id, "session ID")
        session = self._store.get_session(sid)
        if session is None or not session.is_active:
            raise SessionNotFoundError(str(sid.value))
        if not session.is_owned_by(principal.user_id):
            raise ForbiddenError("Cannot view session bookings")
        return self._store.list_bookings_by_session(sid)

    def volunteer_stats(self, volunteer_id: UserId) -> VolunteerStats:
        return self._store.volunteer_stats(volunteer_id, self._clock())
