from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from tutoring.models import Booking, Session, User


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    readonly_fields = ["student", "status", "created_at", "cancelled_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(User)
class TutoringUserAdmin(UserAdmin):
    list_display = ["username", "email", "role", "first_name", "last_name"]
    list_filter = ["role", "is_staff"]
    fieldsets = UserAdmin.fieldsets + (
        (
            "Profile",
            {
                "fields": [
                    "role",
                    "description",
                    "profile_picture",
                    "education_qualifications",
                    "subjects",
                    "experience",
                    "resume_url",
                ]
            },
        ),
    )
    add_fieldsets = UserAdmin.add_fieldsets + ((None, {"fields": ["role"]}),)

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly.append("role")
        return readonly


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "volunteer",
        "subject",
        "scheduled_at",
        "current_students",
        "max_students",
        "is_active",
    ]
    list_filter = ["is_active", "subject"]
    search_fields = ["title", "description", "volunteer__username"]
    readonly_fields = ["current_students"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Bookings change only through BookingService, which keeps enrolment counts."""

    list_display = ["student", "session", "status", "created_at", "cancelled_at"]
    list_filter = ["status"]
    readonly_fields = ["student", "session", "status", "created_at", "cancelled_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
