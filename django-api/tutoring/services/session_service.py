"""Session lifecycle: create -> (edit)* -> soft-delete.

Only the volunteer who created a session may change it.
"""

import logging
from collections.abc import Mapping
from datetime import timezone, tzinfo
from typing import Any
from uuid import UUID

from tutoring.domain import Principal, Role, Session, SessionId
from tutoring.domain.errors import (
    ForbiddenError,
    SessionNotFoundError,
    SessionValidationError,
)
from tutoring.domain.session_input import parse_session_fields
from tutoring.services.common import parse_id
from tutoring.stores.interfaces import TutoringStore

logger = logging.getLogger(__name__)


class SessionService:
    """Service for publishing and managing tutoring sessions."""

    def __init__(self, store: TutoringStore, tz: tzinfo = timezone.utc) -> None:
        self._store = store
        self._tz = tz

    def create_session(self, principal: Principal, data: Mapping[str, Any]) -> Session:
        """Publish a new session owned by the calling volunteer.

        Raises:
            ForbiddenError: If the caller is not a volunteer.
            SessionValidationError: If required fields are missing or malformed.
        """
        principal.require(Role.VOLUNTEER, "Only volunteers can create sessions")
        fields = parse_session_fields(data, self._tz)
        session = self._store.create_session(principal.user_id, fields)
        logger.info(
            "Session %s created by volunteer %s",
            session.id.value,
            principal.user_id.value,
        )
        return session

    def get_session(self, session_id: str | UUID) -> Session:
        """Return an active session with its volunteer.

        Raises:
            InvalidIdError: If session_id is not a valid UUID.
            SessionNotFoundError: If the session is missing or soft-deleted.
        """
        sid = parse_id(SessionId, session_id, "session ID")
        session = self._store.get_session(sid)
        if session is None or not session.is_active:
            raise SessionNotFoundError(str(sid.value))
        return session

    def update_session(
        self, principal: Principal, session_id: str | UUID, data: Mapping[str, Any]
    ) -> Session:
        """Apply a partial update to a session the caller owns.

        Enrolment and the active flag cannot be changed here.

        Raises:
            SessionNotFoundError: If the session does not exist.
            ForbiddenError: If the caller does not own the session.
            SessionValidationError: If a supplied field is malformed.
        """
        sid = parse_id(SessionId, session_id, "session ID")
        with self._store.locked_session(sid) as session:
            _check_owner(principal, sid, session, "edit")
            fields = parse_session_fields(data, self._tz, partial=True)
            _check_capacity_not_below_enrolment(fields, session)
            updated = self._store.update_session(sid, fields)
        logger.info("Session %s updated: fields=%s", sid.value, sorted(fields))
        return updated

    def delete_session(self, principal: Principal, session_id: str | UUID) -> bool:
        """Soft-delete a session the caller owns. Bookings are kept.

        Raises:
            SessionNotFoundError: If the session does not exist.
            ForbiddenError: If the caller does not own the session.
        """
        sid = parse_id(SessionId, session_id, "session ID")
        _check_owner(principal, sid, self._store.get_session(sid), "delete")
        deleted = self._store.deactivate_session(sid)
        logger.info("Session %s deleted", sid.value)
        return deleted


def _check_owner(
    principal: Principal, sid: SessionId, session: Session | None, action: str
) -> None:
    if session is None or not session.is_active:
        raise SessionNotFoundError(str(sid.value))
    if not session.is_owned_by(principal.user_id):
        raise ForbiddenError(f"You can only {action} your own sessions")


def _check_capacity_not_below_enrolment(
    fields: dict[str, Any], session: Session
) -> None:
    capacity = fields.get("max_students")
    if capacity is not None and capacity.value < session.current_students:
        raise SessionValidationError(
            {
                "max_students": [
                    "Ensure this value is not lower than the number of "
                    f"booked students ({session.current_students})."
                ]
            }
        )
