"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q


class User(AbstractUser):
    """Persistence model for students and volunteers."""

    class Role(models.TextChoices):
        STUDENT = "student", "Student"
        VOLUNTEER = "volunteer", "Volunteer"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    role = models.CharField(max_length=20, choices=Role.choices)
    description = models.TextField(blank=True, null=True)
    profile_picture = models.CharField(max_length=500, blank=True, null=True)
    # Volunteer-only profile fields
    education_qualifications = models.TextField(blank=True, null=True)
    subjects = models.TextField(blank=True, null=True)
    experience = models.TextField(blank=True, null=True)
    resume_url = models.CharField(max_length=500, blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Session(models.Model):
    """Persistence model for tutoring sessions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    volunteer = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name="sessions"
    )
    title = models.CharField(max_length=200)
    description = models.TextField()
    subject = models.CharField(max_length=100)
    location = models.TextField()
    requirements = models.TextField(blank=True, null=True)
    scheduled_at = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField()
    max_students = models.PositiveIntegerField()
    current_students = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sessions"
        ordering = ["scheduled_at"]
        indexes = [
            models.Index(
                fields=["is_active", "scheduled_at"], name="sessions_active_sched_idx"
            ),
            models.Index(
                fields=["volunteer", "-created_at"], name="sessions_volunteer_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_students__gte=1), name="session_max_students_positive"
            ),
            models.CheckConstraint(
                condition=Q(duration_minutes__gte=1), name="session_duration_positive"
            ),
            models.CheckConstraint(
                condition=Q(current_students__gte=0),
                name="session_current_students_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.scheduled_at}"

    @property
    def is_full(self) -> bool:
        return self.current_students >= self.max_students


class Booking(models.Model):
    """Persistence model for bookings."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name="bookings"
    )
    session = models.ForeignKey(
        Session, on_delete=models.PROTECT, related_name="bookings"
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = "bookings"
        indexes = [
            models.Index(
                fields=["session", "status"], name="bookings_session_status_idx"
            ),
            models.Index(
                fields=["student", "status"], name="bookings_student_status_idx"
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "session"],
                condition=Q(status="active"),
                name="unique_active_booking_per_student",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.session} ({self.status})"
