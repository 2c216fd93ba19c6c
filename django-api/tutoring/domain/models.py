"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in tutoring/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from tutoring.domain.errors import ForbiddenError
from tutoring.domain.value_objects import (
    BookingId,
    BookingStatus,
    Capacity,
    Duration,
    Role,
    ScheduledInstant,
    SessionId,
    UserId,
)


@dataclass(frozen=True)
class Member:
    """Domain representation of a User (student or volunteer)."""

    id: UserId
    role: Role
    username: str
    first_name: str
    last_name: str
    email: str
    description: str | None = None
    profile_picture: str | None = None
    qualifications: str | None = None
    subjects: str | None = None
    experience: str | None = None
    resume_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a core operation."""

    user_id: UserId
    role: Role

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT

    @property
    def is_volunteer(self) -> bool:
        return self.role is Role.VOLUNTEER

    def require(self, role: Role, message: str) -> None:
        """Raise ForbiddenError unless the caller has ``role``."""
        if self.role is not role:
            raise ForbiddenError(message)


@dataclass(frozen=True)
class Session:
    """Domain representation of a tutoring Session.

    ``current_students`` is a cache of the active booking count and is only
    ever written by capacity accounting.
    """

    id: SessionId
    volunteer_id: UserId
    title: str
    description: str
    subject: str
    location: str
    requirements: str | None
    scheduled_at: ScheduledInstant
    duration: Duration
    max_students: Capacity
    current_students: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    volunteer: Member | None = None

    @property
    def is_full(self) -> bool:
        return self.max_students.is_exhausted_by(self.current_students)

    @property
    def seats_left(self) -> int:
        return self.max_students.seats_left(self.current_students)

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at.value + timedelta(minutes=self.duration.minutes)

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.volunteer_id == user_id

    def is_open_at(self, moment: datetime) -> bool:
        """Active, not yet started and with a free seat."""
        return (
            self.is_active
            and self.scheduled_at.is_after(moment)
            and not self.is_full
        )

    def matches(self, search: str | None = None, subject: str | None = None) -> bool:
        """Case-insensitive text search and exact subject filter."""
        if subject and self.subject != subject:
            return False
        if not search:
            return True
        needle = search.casefold()
        haystacks = [self.title, self.description]
        if self.volunteer is not None:
            haystacks.append(self.volunteer.full_name)
        return any(needle in text.casefold() for text in haystacks)


@dataclass(frozen=True)
class Booking:
    """Domain representation of a student's seat in a Session."""

    id: BookingId
    student_id: UserId
    session_id: SessionId
    status: BookingStatus
    created_at: datetime
    cancelled_at: datetime | None = None
    session: Session | None = None
    student: Member | None = None

    @property
    def is_active(self) -> bool:
        return self.status is BookingStatus.ACTIVE

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.student_id == user_id


@dataclass(frozen=True)
class VolunteerStats:
    """Dashboard counters for a volunteer."""

    total_sessions: int
    students_helped: int
    upcoming_sessions: int
