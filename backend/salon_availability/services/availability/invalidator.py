# backend/salon_availability/services/availability/invalidator.py
"""
Cache invalidation for salon weekly-hours windows.

Triggers:
✓ Salon week schedule changed → invalidate all dates

Does NOT trigger:
✗ Salon holiday exception created/deleted (read fresh on every listing)
✗ Reservation created/cancelled (never cached)
✗ Staff week schedule / staff exception changed (never cached)
"""

from datetime import date
from redis import Redis

from .redis_store import SalonWindowRedisStore


def invalidate_salon_cache(
    redis: Redis,
    salon_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached windows for salon.

    Args:
        dates: Specific dates, or None to invalidate every cached date

    Returns:
        Number of deleted cache keys
    """
    store = SalonWindowRedisStore(redis)
    return store.delete_windows(salon_id, dates)
