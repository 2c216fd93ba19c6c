from tutoring.handlers.views import (
    BookingCancelView,
    BookingListView,
    MyBookingListView,
    MySessionListView,
    SessionBookingListView,
    SessionDetailView,
    SessionListView,
    VolunteerStatsView,
)

__all__ = [
    "BookingCancelView",
    "BookingListView",
    "MyBookingListView",
    "MySessionListView",
    "SessionBookingListView",
    "SessionDetailView",
    "SessionListView",
    "VolunteerStatsView",
]
