"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Self
from uuid import UUID


class Role(Enum):
    """The two kinds of account on the platform."""

    STUDENT = "student"
    VOLUNTEER = "volunteer"


class BookingStatus(Enum):
    """Booking states. There is no transition out of CANCELLED."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class UserId:
    """Unique identifier for a User."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))


@dataclass(frozen=True)
class Capacity:
    """Seat limit of a session. A session always offers at least one seat."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be at least 1")

    def is_exhausted_by(self, taken: int) -> bool:
        return taken >= self.value

    def seats_left(self, taken: int) -> int:
        return max(self.value - taken, 0)


@dataclass(frozen=True)
class Duration:
    """Length of a session in whole minutes."""

    minutes: int

    def __post_init__(self) -> None:
        if self.minutes < 1:
            raise ValueError("Duration must be at least 1 minute")


@dataclass(frozen=True)
class ScheduledInstant:
    """Timezone-aware start instant of a session."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None or self.value.utcoffset() is None:
            raise ValueError("Scheduled instant must be timezone-aware")

    @classmethod
    def combine(cls, day: date, time_of_day: time, tz: tzinfo) -> Self:
        """Build an instant from a calendar date and a time of day in ``tz``."""
        naive = datetime.combine(day, time_of_day.replace(tzinfo=None))
        return cls(value=_localize(naive, tz))

    @classmethod
    def from_datetime(cls, value: datetime, tz: tzinfo) -> Self:
        """Accept aware datetimes as-is; naive ones are read in ``tz``."""
        if value.tzinfo is None:
            return cls(value=_localize(value, tz))
        return cls(value=value)

    def is_after(self, moment: datetime) -> bool:
        return self.value > moment


def _localize(naive: datetime, tz: tzinfo) -> datetime:
    # zoneinfo and datetime.timezone both resolve offsets via replace()
    return naive.replace(tzinfo=tz)
