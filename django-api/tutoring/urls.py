from django.urls import path

from tutoring.handlers import (
    BookingCancelView,
    BookingListView,
    MyBookingListView,
    MySessionListView,
    SessionBookingListView,
    SessionDetailView,
    SessionListView,
    VolunteerStatsView,
)

urlpatterns = [
    path("sessions", SessionListView.as_view(), name="session-list"),
    path("sessions/my", MySessionListView.as_view(), name="my-session-list"),
    path(
        "sessions/<str:session_id>",
        SessionDetailView.as_view(),
        name="session-detail",
    ),
    path(
        "sessions/<str:session_id>/bookings",
        SessionBookingListView.as_view(),
        name="session-booking-list",
    ),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/my", MyBookingListView.as_view(), name="my-booking-list"),
    path(
        "bookings/<str:booking_id>/cancel",
        BookingCancelView.as_view(),
        name="booking-cancel",
    ),
    path("volunteer/stats", VolunteerStatsView.as_view(), name="volunteer-stats"),
]
