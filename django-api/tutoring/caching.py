"""Cache keys shared by the Django store and the invalidation signals."""

from django.conf import settings
from django.core.cache import cache

AVAILABLE_SESSIONS_KEY = "sessions:available"


def volunteer_stats_key(volunteer_id) -> str:
    return f"volunteers:{volunteer_id}:stats"


def cache_ttl() -> int:
    return getattr(settings, "TUTORING_CACHE_TTL", 30)


def invalidate_for_volunteer(volunteer_id) -> None:
    cache.delete_many([AVAILABLE_SESSIONS_KEY, volunteer_stats_key(volunteer_id)])
