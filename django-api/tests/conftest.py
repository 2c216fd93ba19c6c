"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from factories import future, make_member
from tutoring.domain import Member, Role
from tutoring.stores.memory_store import InMemoryTutoringStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_store() -> InMemoryTutoringStore:
    return InMemoryTutoringStore()


@pytest.fixture
def volunteer_member(memory_store) -> Member:
    return memory_store.add_member(make_member(Role.VOLUNTEER, "vera"))


@pytest.fixture
def other_volunteer_member(memory_store) -> Member:
    return memory_store.add_member(make_member(Role.VOLUNTEER, "victor", "Victor"))


@pytest.fixture
def student_member(memory_store) -> Member:
    return memory_store.add_member(make_member(Role.STUDENT, "alice", "Alice"))


@pytest.fixture
def other_student_member(memory_store) -> Member:
    return memory_store.add_member(make_member(Role.STUDENT, "bob", "Bob"))


@pytest.fixture
def volunteer(django_user_model):
    return django_user_model.objects.create_user(
        username="vera",
        password="pass-1234",
        email="vera@example.com",
        first_name="Vera",
        last_name="Volunteer",
        role="volunteer",
    )


@pytest.fixture
def other_volunteer(django_user_model):
    return django_user_model.objects.create_user(
        username="victor", password="pass-1234", role="volunteer"
    )


@pytest.fixture
def student(django_user_model):
    return django_user_model.objects.create_user(
        username="alice",
        password="pass-1234",
        first_name="Alice",
        last_name="Student",
        role="student",
    )


@pytest.fixture
def other_student(django_user_model):
    return django_user_model.objects.create_user(
        username="bob", password="pass-1234", first_name="Bob", role="student"
    )


@pytest.fixture
def make_session(volunteer):
    """Create a Session row directly, bypassing the service layer."""
    from tutoring.models import Session

    def _make(**overrides):
        values = {
            "volunteer": volunteer,
            "title": "Intro to fractions",
            "description": "Adding and comparing fractions",
            "subject": "Mathematics",
            "location": "Community library",
            "scheduled_at": future(),
            "duration_minutes": 60,
            "max_students": 2,
        }
        values.update(overrides)
        return Session.objects.create(**values)

    return _make
