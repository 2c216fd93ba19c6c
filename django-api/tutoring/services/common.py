"""Helpers shared by the service layer."""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar
from uuid import UUID

from tutoring.domain.errors import InvalidIdError

Clock = Callable[[], datetime]

IdT = TypeVar("IdT")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(kind: type[IdT], raw: str | UUID, label: str) -> IdT:
    """Build an identifier value object, raising InvalidIdError when malformed."""
    if isinstance(raw, UUID):
        return kind(value=raw)
    try:
        return kind.from_string(str(raw))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(label) from None
