"""Booking lifecycle: create (active) -> cancel (cancelled).

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from uuid import UUID

from tutoring.domain import Booking, BookingId, Principal, Role, SessionId
from tutoring.domain.errors import (
    AlreadyBookedError,
    BookingNotFoundError,
    ForbiddenError,
    SessionNotFoundError,
)
from tutoring.services.capacity import CapacityAccountant
from tutoring.services.common import Clock, parse_id, utc_now
from tutoring.stores.interfaces import TutoringStore

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking and cancelling seats."""

    def __init__(
        self,
        store: TutoringStore,
        capacity: CapacityAccountant | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._capacity = capacity or CapacityAccountant(store)
        self._clock = clock

    def create_booking(self, principal: Principal, session_id: str | UUID) -> Booking:
        """Book one seat of a session for the calling student.

        The capacity check, the insert and the recompute run while the
        session row is locked, so concurrent bookings cannot overbook.

        Raises:
            ForbiddenError: If the caller is not a student.
            InvalidIdError: If session_id is not a valid UUID.
            SessionNotFoundError: If the session is missing or soft-deleted.
            AlreadyBookedError: If the student already holds an active booking.
            SessionFullError: If no seat is left.
        """
        principal.require(Role.STUDENT, "Only students can book sessions")
        sid = parse_id(SessionId, session_id, "session ID")

        with self._store.locked_session(sid) as session:
            if session is None or not session.is_active:
                raise SessionNotFoundError(str(sid.value))
            if self._store.find_active_booking(principal.user_id, sid) is not None:
                raise AlreadyBookedError(str(sid.value))
            self._capacity.ensure_capacity(session)
            booking = self._store.add_booking(principal.user_id, sid)
            self._capacity.recompute_count(sid)

        logger.info(
            "Booking %s created: student=%s session=%s",
            booking.id.value,
            principal.user_id.value,
            sid.value,
        )
        return booking

    def cancel_booking(self, principal: Principal, booking_id: str | UUID) -> Booking:
        """Cancel one of the caller's bookings and free its seat.

        Cancelling an already cancelled booking changes nothing.

        Raises:
            InvalidIdError: If booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            ForbiddenError: If the booking belongs to someone else.
        """
        bid = parse_id(BookingId, booking_id, "booking ID")
        booking = self._store.get_booking(bid)
        if booking is None:
            raise BookingNotFoundError(str(bid.value))
        if not booking.is_owned_by(principal.user_id):
            raise ForbiddenError("You can only cancel your own bookings")
        if not booking.is_active:
            return booking

        with self._store.locked_session(booking.session_id):
            cancelled = self._store.mark_booking_cancelled(bid, self._clock())
            self._capacity.recompute_count(booking.session_id)

        logger.info(
            "Booking %s cancelled: session=%s", bid.value, booking.session_id.value
        )
        return cancelled
