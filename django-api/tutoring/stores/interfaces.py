"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any

from tutoring.domain import (
    Booking,
    BookingId,
    Member,
    Session,
    SessionId,
    UserId,
    VolunteerStats,
)


class TutoringStore(ABC):
    """Interface for session and booking persistence operations."""

    @abstractmethod
    def get_member(self, user_id: UserId) -> Member | None:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def create_session(self, volunteer_id: UserId, fields: dict[str, Any]) -> Session:
        """Insert a session with zero enrolment and return it."""
        ...

    @abstractmethod
    def get_session(self, session_id: SessionId) -> Session | None:
        """Return a session with its volunteer, active or not."""
        ...

    @abstractmethod
    def update_session(
        self, session_id: SessionId, fields: dict[str, Any]
    ) -> Session | None:
        """Apply the given fields in one write and return the updated session."""
        ...

    @abstractmethod
    def deactivate_session(self, session_id: SessionId) -> bool:
        """Soft-delete a session. Return False if it does not exist."""
        ...

    @abstractmethod
    def list_open_sessions(self, now: datetime) -> list[Session]:
        """Return active, not full sessions starting after ``now``, soonest first."""
        ...

    @abstractmethod
    def list_sessions_by_volunteer(self, volunteer_id: UserId) -> list[Session]:
        """Return a volunteer's active sessions, newest created first."""
        ...

    @abstractmethod
    def locked_session(
        self, session_id: SessionId
    ) -> AbstractContextManager[Session | None]:
        """Hold an exclusive lock on a session row for a check-then-act sequence.

        Every store call made inside the block is part of one atomic unit.
        Yields None when the session does not exist.
        """
        ...

    @abstractmethod
    def find_active_booking(
        self, student_id: UserId, session_id: SessionId
    ) -> Booking | None:
        """Return the student's active booking for a session, if any."""
        ...

    @abstractmethod
    def add_booking(self, student_id: UserId, session_id: SessionId) -> Booking:
        """Insert an active booking."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def mark_booking_cancelled(
        self, booking_id: BookingId, cancelled_at: datetime
    ) -> Booking | None:
        """Set a booking's status to cancelled."""
        ...

    @abstractmethod
    def count_active_bookings(self, session_id: SessionId) -> int:
        """Count active bookings referencing a session."""
        ...

    @abstractmethod
    def set_current_students(self, session_id: SessionId, count: int) -> None:
        """Persist the derived enrolment count of a session."""
        ...

    @abstractmethod
    def booked_session_ids(self, student_id: UserId) -> set[SessionId]:
        """Return IDs of sessions the student holds an active booking for."""
        ...

    @abstractmethod
    def list_bookings_by_student(self, student_id: UserId) -> list[Booking]:
        """Return active bookings on active sessions, with session and volunteer."""
        ...

    @abstractmethod
    def list_bookings_by_session(self, session_id: SessionId) -> list[Booking]:
        """Return active bookings of a session, with student."""
        ...

    @abstractmethod
    def volunteer_stats(self, volunteer_id: UserId, now: datetime) -> VolunteerStats:
        """Return dashboard counters for a volunteer."""
        ...
