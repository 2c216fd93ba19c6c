"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class MemberSerializer(serializers.Serializer):
    """Serializer for Member domain model."""

    id = serializers.UUIDField(source="id.value")
    role = serializers.CharField(source="role.value")
    username = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    full_name = serializers.CharField()
    email = serializers.EmailField()
    description = serializers.CharField(allow_null=True)
    profile_picture = serializers.CharField(allow_null=True)
    qualifications = serializers.CharField(allow_null=True)
    subjects = serializers.CharField(allow_null=True)
    experience = serializers.CharField(allow_null=True)


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model."""

    id = serializers.UUIDField(source="id.value")
    volunteer_id = serializers.UUIDField(source="volunteer_id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    subject = serializers.CharField()
    location = serializers.CharField()
    requirements = serializers.CharField(allow_null=True)
    scheduled_at = serializers.DateTimeField(source="scheduled_at.value")
    ends_at = serializers.DateTimeField()
    duration = serializers.IntegerField(source="duration.minutes")
    max_students = serializers.IntegerField(source="max_students.value")
    current_students = serializers.IntegerField()
    seats_left = serializers.IntegerField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    volunteer = MemberSerializer(allow_null=True)


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    student_id = serializers.UUIDField(source="student_id.value")
    session_id = serializers.UUIDField(source="session_id.value")
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()
    cancelled_at = serializers.DateTimeField(allow_null=True)
    session = SessionSerializer(allow_null=True)
    student = MemberSerializer(allow_null=True)


class VolunteerStatsSerializer(serializers.Serializer):
    """Serializer for VolunteerStats domain model."""

    total_sessions = serializers.IntegerField()
    students_helped = serializers.IntegerField()
    upcoming_sessions = serializers.IntegerField()
