"""Django signals for cache invalidation.

Keys are dropped immediately and again once the surrounding transaction
commits, so a reader racing the write cannot re-cache pre-commit state.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from tutoring.caching import invalidate_for_volunteer
from tutoring.models import Booking, Session


def _invalidate(volunteer_id) -> None:
    invalidate_for_volunteer(volunteer_id)
    transaction.on_commit(lambda: invalidate_for_volunteer(volunteer_id))


@receiver([post_save, post_delete], sender=Session)
def invalidate_session_cache(sender, instance, **kwargs):
    """Invalidate caches when a session is saved or deleted."""
    _invalidate(instance.volunteer_id)


@receiver([post_save, post_delete], sender=Booking)
def invalidate_booking_cache(sender, instance, **kwargs):
    """Invalidate caches when a booking is saved or deleted."""
    volunteer_id = (
        Session.objects.filter(pk=instance.session_id)
        .values_list("volunteer_id", flat=True)
        .first()
    )
    _invalidate(volunteer_id)
