"""In-memory implementation of the TutoringStore.

Used by service tests and anywhere a database is unnecessary. A single
re-entrant lock stands in for row locks and transactions.
"""

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from tutoring.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Member,
    Session,
    SessionId,
    UserId,
    VolunteerStats,
)
from tutoring.stores.interfaces import TutoringStore


class InMemoryTutoringStore(TutoringStore):
    """Dict-backed store. Not persistent."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._members: dict[UserId, Member] = {}
        self._sessions: dict[SessionId, Session] = {}
        self._bookings: dict[BookingId, Booking] = {}

    def add_member(self, member: Member) -> Member:
        self._members[member.id] = member
        return member

    def get_member(self, user_id: UserId) -> Member | None:
        return self._members.get(user_id)

    def create_session(self, volunteer_id: UserId, fields: dict[str, Any]) -> Session:
        now = _now()
        session = Session(
            id=SessionId(value=uuid.uuid4()),
            volunteer_id=volunteer_id,
            current_students=0,
            is_active=True,
            created_at=now,
            updated_at=now,
            **fields,
        )
        with self._lock:
            self._sessions[session.id] = session
        return self._with_volunteer(session)

    def get_session(self, session_id: SessionId) -> Session | None:
        session = self._sessions.get(session_id)
        return self._with_volunteer(session) if session else None

    def update_session(
        self, session_id: SessionId, fields: dict[str, Any]
    ) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session = replace(session, updated_at=_now(), **fields)
            self._sessions[session_id] = session
        return self._with_volunteer(session)

    def deactivate_session(self, session_id: SessionId) -> bool:
        return self.update_session(session_id, {"is_active": False}) is not None

    def list_open_sessions(self, now: datetime) -> list[Session]:
        sessions = [
            self._with_volunteer(session)
            for session in self._sessions.values()
            if session.is_open_at(now)
        ]
        return sorted(sessions, key=lambda session: session.scheduled_at.value)

    def list_sessions_by_volunteer(self, volunteer_id: UserId) -> list[Session]:
        sessions = [
            self._with_volunteer(session)
            for session in self._sessions.values()
            if session.volunteer_id == volunteer_id and session.is_active
        ]
        return sorted(sessions, key=lambda session: session.created_at, reverse=True)

    @contextmanager
    def locked_session(self, session_id: SessionId) -> Iterator[Session | None]:
        with self._lock:
            yield self._sessions.get(session_id)

    def find_active_booking(
        self, student_id: UserId, session_id: SessionId
    ) -> Booking | None:
        for booking in self._bookings.values():
            if (
                booking.is_active
                and booking.student_id == student_id
                and booking.session_id == session_id
            ):
                return booking
        return None

    def add_booking(self, student_id: UserId, session_id: SessionId) -> Booking:
        booking = Booking(
            id=BookingId(value=uuid.uuid4()),
            student_id=student_id,
            session_id=session_id,
            status=BookingStatus.ACTIVE,
            created_at=_now(),
        )
        with self._lock:
            self._bookings[booking.id] = booking
        return booking

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        return self._bookings.get(booking_id)

    def mark_booking_cancelled(
        self, booking_id: BookingId, cancelled_at: datetime
    ) -> Booking | None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            booking = replace(
                booking, status=BookingStatus.CANCELLED, cancelled_at=cancelled_at
            )
            self._bookings[booking_id] = booking
        return booking

    def count_active_bookings(self, session_id: SessionId) -> int:
        return sum(
            1
            for booking in self._bookings.values()
            if booking.session_id == session_id and booking.is_active
        )

    def set_current_students(self, session_id: SessionId, count: int) -> None:
        self.update_session(session_id, {"current_students": count})

    def booked_session_ids(self, student_id: UserId) -> set[SessionId]:
        return {
            booking.session_id
            for booking in self._bookings.values()
            if booking.student_id == student_id and booking.is_active
        }

    def list_bookings_by_student(self, student_id: UserId) -> list[Booking]:
        bookings = []
        for booking in self._bookings.values():
            session = self._sessions.get(booking.session_id)
            if (
                booking.student_id == student_id
                and booking.is_active
                and session is not None
                and session.is_active
            ):
                bookings.append(replace(booking, session=self._with_volunteer(session)))
        return sorted(bookings, key=lambda booking: booking.session.scheduled_at.value)

    def list_bookings_by_session(self, session_id: SessionId) -> list[Booking]:
        bookings = [
            replace(booking, student=self._members.get(booking.student_id))
            for booking in self._bookings.values()
            if booking.session_id == session_id and booking.is_active
        ]
        return sorted(bookings, key=lambda booking: booking.created_at)

    def volunteer_stats(self, volunteer_id: UserId, now: datetime) -> VolunteerStats:
        sessions = self.list_sessions_by_volunteer(volunteer_id)
        own_ids = {
            session.id
            for session in self._sessions.values()
            if session.volunteer_id == volunteer_id
        }
        students = {
            booking.student_id
            for booking in self._bookings.values()
            if booking.session_id in own_ids and booking.is_active
        }
        return VolunteerStats(
            total_sessions=len(sessions),
            students_helped=len(students),
            upcoming_sessions=sum(
                1 for session in sessions if session.scheduled_at.is_after(now)
            ),
        )

    def _with_volunteer(self, session: Session) -> Session:
        return replace(session, volunteer=self._members.get(session.volunteer_id))


def _now() -> datetime:
    return datetime.now(timezone.utc)
