"""Integration tests for the Django ORM store and capacity accounting.

Run with: pytest tests/test_django_store.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from django.db import IntegrityError, connection, transaction
from django.utils import timezone

from factories import principal_for
from tutoring.domain import BookingStatus, SessionId, UserId
from tutoring.domain.errors import AlreadyBookedError, SessionFullError
from tutoring.models import Booking, Session
from tutoring.services.booking_service import BookingService
from tutoring.services.capacity import CapacityAccountant
from tutoring.stores.django_store import DjangoTutoringStore


@pytest.fixture
def store() -> DjangoTutoringStore:
    return DjangoTutoringStore()


def sid(row: Session) -> SessionId:
    return SessionId(value=row.pk)


@pytest.mark.django_db
class TestCapacityAccounting:
    def test_recompute_counts_only_active_bookings(
        self, store, make_session, student, other_student
    ):
        row = make_session(max_students=5)
        Booking.objects.create(student=student, session=row)
        Booking.objects.create(
            student=other_student, session=row, status=Booking.Status.CANCELLED
        )

        count = CapacityAccountant(store).recompute_count(sid(row))

        row.refresh_from_db()
        assert count == 1
        assert row.current_students == 1

    def test_booking_and_cancel_keep_counter_in_sync(
        self, store, make_session, student, other_student
    ):
        row = make_session(max_students=1)
        service = BookingService(store)

        booking = service.create_booking(principal_for(student), row.pk)
        row.refresh_from_db()
        assert row.current_students == 1

        with pytest.raises(SessionFullError):
            service.create_booking(principal_for(other_student), row.pk)
        assert Booking.objects.filter(session=row).count() == 1

        service.cancel_booking(principal_for(student), booking.id.value)
        row.refresh_from_db()
        assert row.current_students == 0
        assert Booking.objects.get(pk=booking.id.value).status == "cancelled"

        service.create_booking(principal_for(other_student), row.pk)
        row.refresh_from_db()
        assert row.current_students == 1

    def test_duplicate_booking_is_rejected(self, store, make_session, student):
        row = make_session()
        service = BookingService(store)
        service.create_booking(principal_for(student), row.pk)

        with pytest.raises(AlreadyBookedError):
            service.create_booking(principal_for(student), row.pk)

        row.refresh_from_db()
        assert row.current_students == 1

    def test_database_forbids_two_active_bookings_per_student(
        self, make_session, student
    ):
        row = make_session()
        Booking.objects.create(student=student, session=row)
        with pytest.raises(IntegrityError), transaction.atomic():
            Booking.objects.create(student=student, session=row)

    def test_cancelled_bookings_do_not_block_rebooking_at_database_level(
        self, make_session, student
    ):
        row = make_session()
        Booking.objects.create(
            student=student, session=row, status=Booking.Status.CANCELLED
        )
        Booking.objects.create(student=student, session=row)
        assert Booking.objects.filter(session=row).count() == 2


@pytest.mark.django_db
class TestSessionQueries:
    def test_open_sessions_exclude_past_full_and_inactive(self, store, make_session):
        now = timezone.now()
        later = make_session(title="Later", scheduled_at=now + timedelta(days=4))
        sooner = make_session(title="Sooner", scheduled_at=now + timedelta(days=1))
        make_session(title="Past", scheduled_at=now - timedelta(minutes=1))
        make_session(title="Full", max_students=1, current_students=1)
        make_session(title="Inactive", is_active=False)

        sessions = store.list_open_sessions(now)

        assert [s.id.value for s in sessions] == [sooner.pk, later.pk]
        assert sessions[0].volunteer is not None

    def test_sessions_by_volunteer_newest_first(
        self, store, make_session, volunteer, other_volunteer
    ):
        older = make_session(title="Older")
        newer = make_session(title="Newer")
        make_session(title="Deleted", is_active=False)
        make_session(title="Someone else's", volunteer=other_volunteer)
        Session.objects.filter(pk=older.pk).update(
            created_at=timezone.now() - timedelta(days=2)
        )

        sessions = store.list_sessions_by_volunteer(UserId(value=volunteer.pk))

        assert [s.id.value for s in sessions] == [newer.pk, older.pk]

    def test_update_session_writes_only_given_columns(self, store, make_session):
        row = make_session(title="Before")
        store.update_session(sid(row), {"title": "After"})
        row.refresh_from_db()
        assert row.title == "After"
        assert row.description == "Adding and comparing fractions"

    def test_deactivate_session_keeps_bookings(self, store, make_session, student):
        row = make_session()
        Booking.objects.create(student=student, session=row)

        assert store.deactivate_session(sid(row))

        row.refresh_from_db()
        assert not row.is_active
        assert Booking.objects.filter(session=row, status="active").count() == 1
        assert store.list_bookings_by_student(UserId(value=student.pk)) == []

    def test_deactivate_missing_session(self, store):
        assert not store.deactivate_session(
            SessionId.from_string("00000000-0000-0000-0000-000000000000")
        )

    def test_bookings_by_session_include_student(
        self, store, make_session, student, other_student
    ):
        row = make_session()
        Booking.objects.create(student=student, session=row)
        Booking.objects.create(
            student=other_student, session=row, status=Booking.Status.CANCELLED
        )

        [booking] = store.list_bookings_by_session(sid(row))

        assert booking.status is BookingStatus.ACTIVE
        assert booking.student.username == "alice"

    def test_volunteer_stats(
        self, store, make_session, volunteer, student, other_student
    ):
        now = timezone.now()
        upcoming = make_session()
        past = make_session(scheduled_at=now - timedelta(days=1))
        make_session(is_active=False)
        Booking.objects.create(student=student, session=upcoming)
        Booking.objects.create(student=student, session=past)
        Booking.objects.create(
            student=other_student, session=upcoming, status=Booking.Status.CANCELLED
        )

        stats = store.volunteer_stats(UserId(value=volunteer.pk), now)

        assert stats.total_sessions == 2
        assert stats.students_helped == 1
        assert stats.upcoming_sessions == 1


@pytest.mark.django_db(transaction=True)
class TestConcurrentBooking:
    def test_parallel_bookings_never_overbook(self, make_session, django_user_model):
        row = make_session(max_students=2)
        students = [
            django_user_model.objects.create_user(
                username=f"student{n}", password="pass-1234", role="student"
            )
            for n in range(6)
        ]
        service = BookingService(DjangoTutoringStore())
        barrier = threading.Barrier(len(students))

        def attempt(user) -> str:
            try:
                barrier.wait()
                service.create_booking(principal_for(user), row.pk)
                return "booked"
            except SessionFullError:
                return "full"
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=len(students)) as pool:
            outcomes = list(pool.map(attempt, students))

        assert sorted(outcomes) == ["booked"] * 2 + ["full"] * 4
        row.refresh_from_db()
        assert row.current_students == 2
        active = Booking.objects.filter(session=row, status=Booking.Status.ACTIVE)
        assert active.count() == 2
