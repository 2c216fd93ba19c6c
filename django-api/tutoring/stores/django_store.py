"""Django ORM implementation of the TutoringStore."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from django.core.cache import cache
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from tutoring import models
from tutoring.caching import AVAILABLE_SESSIONS_KEY, cache_ttl, volunteer_stats_key
from tutoring.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    Duration,
    Member,
    Role,
    ScheduledInstant,
    Session,
    SessionId,
    UserId,
    VolunteerStats,
)
from tutoring.stores.interfaces import TutoringStore


class DjangoTutoringStore(TutoringStore):
    """Relational store backed by the Django ORM."""

    def get_member(self, user_id: UserId) -> Member | None:
        row = models.User.objects.filter(pk=user_id.value).first()
        return to_member(row) if row else None

    def create_session(self, volunteer_id: UserId, fields: dict[str, Any]) -> Session:
        row = models.Session.objects.create(
            volunteer_id=volunteer_id.value,
            current_students=0,
            is_active=True,
            **dict(_columns(fields)),
        )
        return to_session(row)

    def get_session(self, session_id: SessionId) -> Session | None:
        row = (
            models.Session.objects.select_related("volunteer")
            .filter(pk=session_id.value)
            .first()
        )
        return to_session(row) if row else None

    def update_session(
        self, session_id: SessionId, fields: dict[str, Any]
    ) -> Session | None:
        row = (
            models.Session.objects.select_related("volunteer")
            .filter(pk=session_id.value)
            .first()
        )
        if row is None:
            return None
        columns = dict(_columns(fields))
        for column, value in columns.items():
            setattr(row, column, value)
        row.save(update_fields=[*columns, "updated_at"])
        return to_session(row)

    def deactivate_session(self, session_id: SessionId) -> bool:
        row = models.Session.objects.filter(pk=session_id.value).first()
        if row is None:
            return False
        row.is_active = False
        row.save(update_fields=["is_active", "updated_at"])
        return True

    def list_open_sessions(self, now: datetime) -> list[Session]:
        sessions = cache.get(AVAILABLE_SESSIONS_KEY)
        if sessions is None:
            rows = (
                models.Session.objects.select_related("volunteer")
                .filter(
                    is_active=True,
                    scheduled_at__gt=now,
                    current_students__lt=F("max_students"),
                )
                .order_by("scheduled_at")
            )
            sessions = [to_session(row) for row in rows]
            cache.set(AVAILABLE_SESSIONS_KEY, sessions, cache_ttl())
        return sessions

    def list_sessions_by_volunteer(self, volunteer_id: UserId) -> list[Session]:
        rows = (
            models.Session.objects.select_related("volunteer")
            .filter(volunteer_id=volunteer_id.value, is_active=True)
            .order_by("-created_at")
        )
        return [to_session(row) for row in rows]

    @contextmanager
    def locked_session(self, session_id: SessionId) -> Iterator[Session | None]:
        with transaction.atomic():
            row = (
                models.Session.objects.select_for_update()
                .filter(pk=session_id.value)
                .first()
            )
            yield to_session(row, with_volunteer=False) if row else None

    def find_active_booking(
        self, student_id: UserId, session_id: SessionId
    ) -> Booking | None:
        row = models.Booking.objects.filter(
            student_id=student_id.value,
            session_id=session_id.value,
            status=models.Booking.Status.ACTIVE,
        ).first()
        return to_booking(row) if row else None

    def add_booking(self, student_id: UserId, session_id: SessionId) -> Booking:
        row = models.Booking.objects.create(
            student_id=student_id.value,
            session_id=session_id.value,
            status=models.Booking.Status.ACTIVE,
        )
        return to_booking(row)

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id.value).first()
        return to_booking(row) if row else None

    def mark_booking_cancelled(
        self, booking_id: BookingId, cancelled_at: datetime
    ) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id.value).first()
        if row is None:
            return None
        row.status = models.Booking.Status.CANCELLED
        row.cancelled_at = cancelled_at
        row.save(update_fields=["status", "cancelled_at"])
        return to_booking(row)

    def count_active_bookings(self, session_id: SessionId) -> int:
        return models.Booking.objects.filter(
            session_id=session_id.value, status=models.Booking.Status.ACTIVE
        ).count()

    def set_current_students(self, session_id: SessionId, count: int) -> None:
        models.Session.objects.filter(pk=session_id.value).update(
            current_students=count, updated_at=timezone.now()
        )

    def booked_session_ids(self, student_id: UserId) -> set[SessionId]:
        values = models.Booking.objects.filter(
            student_id=student_id.value, status=models.Booking.Status.ACTIVE
        ).values_list("session_id", flat=True)
        return {SessionId(value=value) for value in values}

    def list_bookings_by_student(self, student_id: UserId) -> list[Booking]:
        rows = (
            models.Booking.objects.select_related("session__volunteer")
            .filter(
                student_id=student_id.value,
                status=models.Booking.Status.ACTIVE,
                session__is_active=True,
            )
            .order_by("session__scheduled_at")
        )
        return [to_booking(row, session=to_session(row.session)) for row in rows]

    def list_bookings_by_session(self, session_id: SessionId) -> list[Booking]:
        rows = (
            models.Booking.objects.select_related("student")
            .filter(session_id=session_id.value, status=models.Booking.Status.ACTIVE)
            .order_by("created_at")
        )
        return [to_booking(row, student=to_member(row.student)) for row in rows]

    def volunteer_stats(self, volunteer_id: UserId, now: datetime) -> VolunteerStats:
        sessions = models.Session.objects.filter(
            volunteer_id=volunteer_id.value, is_active=True
        )
        key = volunteer_stats_key(volunteer_id.value)
        totals = cache.get(key)
        if totals is None:
            students_helped = (
                models.Booking.objects.filter(
                    session__volunteer_id=volunteer_id.value,
                    status=models.Booking.Status.ACTIVE,
                )
                .values("student_id")
                .distinct()
                .count()
            )
            totals = (sessions.count(), students_helped)
            cache.set(key, totals, cache_ttl())
        total_sessions, students_helped = totals
        # Depends on ``now``, so never cached.
        upcoming = sessions.filter(scheduled_at__gt=now).count()
        return VolunteerStats(
            total_sessions=total_sessions,
            students_helped=students_helped,
            upcoming_sessions=upcoming,
        )


def _columns(fields: dict[str, Any]) -> Iterator[tuple[str, Any]]:
    for name, value in fields.items():
        if name == "scheduled_at":
            yield "scheduled_at", value.value
        elif name == "duration":
            yield "duration_minutes", value.minutes
        elif name == "max_students":
            yield "max_students", value.value
        else:
            yield name, value


def to_member(row: models.User) -> Member:
    return Member(
        id=UserId(value=row.pk),
        role=Role(str(row.role)),
        username=row.username,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        description=row.description,
        profile_picture=row.profile_picture,
        qualifications=row.education_qualifications,
        subjects=row.subjects,
        experience=row.experience,
        resume_url=row.resume_url,
    )


def to_session(row: models.Session, with_volunteer: bool = True) -> Session:
    return Session(
        id=SessionId(value=row.pk),
        volunteer_id=UserId(value=row.volunteer_id),
        title=row.title,
        description=row.description,
        subject=row.subject,
        location=row.location,
        requirements=row.requirements,
        scheduled_at=ScheduledInstant(value=row.scheduled_at),
        duration=Duration(minutes=row.duration_minutes),
        max_students=Capacity(value=row.max_students),
        current_students=row.current_students,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        volunteer=to_member(row.volunteer) if with_volunteer else None,
    )


def to_booking(
    row: models.Booking,
    session: Session | None = None,
    student: Member | None = None,
) -> Booking:
    return Booking(
        id=BookingId(value=row.pk),
        student_id=UserId(value=row.student_id),
        session_id=SessionId(value=row.session_id),
        status=BookingStatus(str(row.status)),
        created_at=row.created_at,
        cancelled_at=row.cancelled_at,
        session=session,
        student=student,
    )
