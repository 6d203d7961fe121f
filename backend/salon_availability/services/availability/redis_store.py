# backend/salon_availability/services/availability/redis_store.py
"""
Redis cache for salon-level day windows.

Key format: avail:salon_window:{salon_id}:{date}
Value: "{start_ts}:{end_ts}" for an open day,
       "__closed__:{reason}" for a closed day.

Only the salon weekly hours are cached. Holiday exceptions, staff data
and reservations are always read fresh.
"""

from datetime import date
from redis import Redis

from .config import EngineConfig, get_engine_config
from .snapshot import DayWindow


CLOSED_SENTINEL = "__closed__"


class SalonWindowRedisStore:
    """Redis storage wrapper for resolved salon windows."""

    KEY_PREFIX = "avail:salon_window"

    def __init__(self, redis: Redis, config: EngineConfig | None = None):
        self.redis = redis
        self.config = config or get_engine_config()

    def _key(self, salon_id: int, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{salon_id}:{dt.isoformat()}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_window(self, salon_id: int, dt: date, window: DayWindow) -> None:
        """Store resolved salon window for a day with TTL."""
        self.redis.set(
            self._key(salon_id, dt),
            _encode(window),
            ex=self.config.cache_ttl_seconds,
        )

    # ── Read ─────────────────────────────────────────────────────────────

    def get_window(self, salon_id: int, dt: date) -> DayWindow | None:
        """
        Get cached window.

        Returns:
            DayWindow, or None on cache miss / unreadable value.
        """
        raw = self.redis.get(self._key(salon_id, dt))
        if raw is None:
            return None
        return _decode(raw.decode() if isinstance(raw, bytes) else raw)

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_windows(self, salon_id: int, dates: list[date] | None = None) -> int:
        """
        Delete cached windows.

        Args:
            dates: Specific dates, or None to delete all for salon.

        Returns:
            Number of deleted keys.
        """
        if dates:
            keys = [self._key(salon_id, dt) for dt in dates]
        else:
            keys = list(self.redis.scan_iter(match=f"{self.KEY_PREFIX}:{salon_id}:*"))

        if not keys:
            return 0

        return self.redis.delete(*keys)


def _encode(window: DayWindow) -> str:
    if not window.open:
        return f"{CLOSED_SENTINEL}:{window.reason or ''}"
    return f"{window.start}:{window.end}"


def _decode(value: str) -> DayWindow | None:
    head, _, tail = value.partition(":")
    if head == CLOSED_SENTINEL:
        return DayWindow.closed(tail or "salon_closed")
    try:
        return DayWindow(open=True, start=int(head), end=int(tail))
    except ValueError:
        return None
