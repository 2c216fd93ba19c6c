"""Integration tests for the booking endpoints.

Run with: pytest tests/test_bookings_api.py -v
"""

import uuid

import pytest
from rest_framework.test import APIClient

from tutoring.models import Booking


def book(client: APIClient, user, session_id):
    client.force_authenticate(user)
    return client.post("/api/bookings", {"session_id": str(session_id)}, format="json")


@pytest.mark.django_db
class TestCreateBooking:
    """Tests for POST /api/bookings"""

    def test_student_books_seat(self, api_client: APIClient, make_session, student):
        row = make_session()

        response = book(api_client, student, row.pk)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["session_id"] == str(row.pk)
        assert body["student_id"] == str(student.pk)
        row.refresh_from_db()
        assert row.current_students == 1

    def test_single_seat_goes_to_first_student(
        self, api_client: APIClient, make_session, student, other_student
    ):
        row = make_session(max_students=1)

        first = book(api_client, student, row.pk)
        second = book(api_client, other_student, row.pk)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"code": "SESSION_FULL", "message": "Session is full"}
        row.refresh_from_db()
        assert row.current_students == 1

    def test_cannot_book_twice(self, api_client: APIClient, make_session, student):
        row = make_session()
        book(api_client, student, row.pk)

        response = book(api_client, student, row.pk)

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_BOOKED"
        assert Booking.objects.filter(session=row).count() == 1

    def test_volunteers_cannot_book(
        self, api_client: APIClient, make_session, volunteer
    ):
        row = make_session()
        response = book(api_client, volunteer, row.pk)
        assert response.status_code == 403
        assert not Booking.objects.exists()

    def test_unknown_session(self, api_client: APIClient, student):
        response = book(api_client, student, uuid.uuid4())
        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"

    def test_soft_deleted_session(self, api_client: APIClient, make_session, student):
        row = make_session(is_active=False)
        response = book(api_client, student, row.pk)
        assert response.status_code == 404

    def test_missing_session_id(self, api_client: APIClient, student):
        api_client.force_authenticate(student)
        response = api_client.post("/api/bookings", {}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_non_object_body_is_rejected(self, api_client: APIClient, student):
        api_client.force_authenticate(student)
        response = api_client.post("/api/bookings", [1, 2], format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert not Booking.objects.exists()

    def test_anonymous_cannot_book(self, api_client: APIClient, make_session):
        row = make_session()
        response = api_client.post(
            "/api/bookings", {"session_id": str(row.pk)}, format="json"
        )
        assert response.status_code == 401


@pytest.mark.django_db
class TestCancelBooking:
    """Tests for PUT /api/bookings/{id}/cancel"""

    def test_cancel_frees_seat(
        self, api_client: APIClient, make_session, student, other_student
    ):
        row = make_session(max_students=1)
        booking_id = book(api_client, student, row.pk).json()["id"]

        response = api_client.put(f"/api/bookings/{booking_id}/cancel")

        assert response.status_code == 200
        assert response.json() == {"message": "Booking cancelled successfully"}
        cancelled = Booking.objects.get(pk=booking_id)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_at is not None
        row.refresh_from_db()
        assert row.current_students == 0
        assert book(api_client, other_student, row.pk).status_code == 201

    def test_student_can_rebook_after_cancelling(
        self, api_client: APIClient, make_session, student
    ):
        row = make_session()
        booking_id = book(api_client, student, row.pk).json()["id"]
        api_client.put(f"/api/bookings/{booking_id}/cancel")

        response = book(api_client, student, row.pk)

        assert response.status_code == 201
        assert Booking.objects.filter(session=row).count() == 2

    def test_cannot_cancel_someone_elses_booking(
        self, api_client: APIClient, make_session, student, other_student
    ):
        row = make_session()
        booking_id = book(api_client, student, row.pk).json()["id"]
        api_client.force_authenticate(other_student)

        response = api_client.put(f"/api/bookings/{booking_id}/cancel")

        assert response.status_code == 403
        assert Booking.objects.get(pk=booking_id).status == "active"

    def test_cancel_unknown_booking(self, api_client: APIClient, student):
        api_client.force_authenticate(student)
        response = api_client.put(f"/api/bookings/{uuid.uuid4()}/cancel")
        assert response.status_code == 404
        assert response.json()["code"] == "BOOKING_NOT_FOUND"

    def test_cancel_twice_is_harmless(
        self, api_client: APIClient, make_session, student
    ):
        row = make_session()
        booking_id = book(api_client, student, row.pk).json()["id"]
        api_client.put(f"/api/bookings/{booking_id}/cancel")

        response = api_client.put(f"/api/bookings/{booking_id}/cancel")

        assert response.status_code == 200
        row.refresh_from_db()
        assert row.current_students == 0


@pytest.mark.django_db
class TestMyBookings:
    """Tests for GET /api/bookings/my"""

    def test_lists_own_bookings_with_session(
        self, api_client: APIClient, make_session, student, other_student
    ):
        mine = make_session(title="Mine")
        theirs = make_session(title="Theirs")
        book(api_client, other_student, theirs.pk)
        book(api_client, student, mine.pk)

        response = api_client.get("/api/bookings/my")

        assert response.status_code == 200
        [item] = response.json()
        assert item["session"]["title"] == "Mine"
        assert item["session"]["volunteer"]["username"] == "vera"

    def test_volunteers_have_no_bookings_view(self, api_client: APIClient, volunteer):
        api_client.force_authenticate(volunteer)
        assert api_client.get("/api/bookings/my").status_code == 403
