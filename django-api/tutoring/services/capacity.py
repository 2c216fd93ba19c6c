"""Capacity accounting.

``Session.current_students`` is never trusted on its own: it is recomputed
from the active booking rows whenever a booking is created or cancelled.
"""

import logging

from tutoring.domain import Session, SessionId
from tutoring.domain.errors import SessionFullError
from tutoring.stores.interfaces import TutoringStore

logger = logging.getLogger(__name__)


class CapacityAccountant:
    """Keeps a session's enrolment count equal to its active bookings."""

    def __init__(self, store: TutoringStore) -> None:
        self._store = store

    def recompute_count(self, session_id: SessionId) -> int:
        """Count active bookings, persist the count and return it."""
        count = self._store.count_active_bookings(session_id)
        self._store.set_current_students(session_id, count)
        logger.debug("Session %s enrolment recomputed: %d", session_id.value, count)
        session = self._store.get_session(session_id)
        if session is not None and count > session.max_students.value:
            logger.warning(
                "Session %s is overbooked: %d active bookings for %d seats",
                session_id.value,
                count,
                session.max_students.value,
            )
        return count

    def ensure_capacity(self, session: Session) -> None:
        """Raise SessionFullError when no seat is left."""
        if session.is_full:
            raise SessionFullError(str(session.id.value))
