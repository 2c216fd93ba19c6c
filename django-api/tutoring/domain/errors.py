"""Domain error codes for the tutoring module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    FORBIDDEN = "FORBIDDEN"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    SESSION_FULL = "SESSION_FULL"
    ALREADY_BOOKED = "ALREADY_BOOKED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class SessionValidationError(DomainError):
    """Raised when session input is missing or malformed.

    ``errors`` maps each offending field to its messages.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message="Invalid session data",
        )
        self.errors = errors


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
        )
        self.field = field


class InvalidPayloadError(DomainError):
    """Raised when a request body is not a JSON object."""

    def __init__(self, received: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=f"Invalid data. Expected a dictionary, but got {received}.",
        )


class ForbiddenError(DomainError):
    """Raised on a role or ownership mismatch."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class SessionNotFoundError(DomainError):
    """Raised when a session does not exist or is no longer active."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class BookingNotFoundError(DomainError):
    """Raised when a booking does not exist."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class SessionFullError(DomainError):
    """Raised when every seat of a session is taken."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_FULL,
            message="Session is full",
        )
        self.session_id = session_id


class AlreadyBookedError(DomainError):
    """Raised when the student already holds an active booking for the session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_BOOKED,
            message="You have already booked this session",
        )
        self.session_id = session_id
