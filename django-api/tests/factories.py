"""Builders for test data shared across test modules."""

import uuid
from datetime import datetime, timedelta, timezone

from tutoring.domain import (
    Capacity,
    Duration,
    Member,
    Principal,
    Role,
    ScheduledInstant,
    UserId,
)


def future(days: int = 3) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def session_payload(**overrides) -> dict:
    """Valid create-session input, three days from now."""
    start = future()
    payload = {
        "title": "Intro to fractions",
        "description": "Adding and comparing fractions",
        "subject": "Mathematics",
        "max_students": 2,
        "date": start.date().isoformat(),
        "time": "15:30",
        "duration": 60,
        "location": "Community library, room 2",
    }
    payload.update(overrides)
    return payload


def session_fields(**overrides) -> dict:
    """Parsed domain fields as accepted by TutoringStore.create_session."""
    fields = {
        "title": "Intro to fractions",
        "description": "Adding and comparing fractions",
        "subject": "Mathematics",
        "location": "Community library, room 2",
        "requirements": None,
        "scheduled_at": ScheduledInstant(value=future()),
        "duration": Duration(minutes=60),
        "max_students": Capacity(value=2),
    }
    fields.update(overrides)
    return fields


def make_member(role: Role, username: str, first_name: str = "Ada") -> Member:
    return Member(
        id=UserId(value=uuid.uuid4()),
        role=role,
        username=username,
        first_name=first_name,
        last_name="Lovelace",
        email=f"{username}@example.com",
    )


def principal_for(member) -> Principal:
    """Principal for a domain Member or a Django user row."""
    if isinstance(member, Member):
        return Principal(user_id=member.id, role=member.role)
    return Principal(user_id=UserId(value=member.pk), role=Role(member.role))
