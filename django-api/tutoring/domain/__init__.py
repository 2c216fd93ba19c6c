from tutoring.domain.models import Booking, Member, Principal, Session, VolunteerStats
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

__all__ = [
    "Booking",
    "Member",
    "Principal",
    "Session",
    "VolunteerStats",
    "BookingId",
    "BookingStatus",
    "Capacity",
    "Duration",
    "Role",
    "ScheduledInstant",
    "SessionId",
    "UserId",
]
