# backend/salon_availability/services/availability/config.py
"""
Engine configuration and time helpers for availability computation.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from zoneinfo import ZoneInfo

from .errors import InvalidDateError


DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
HOUR_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

MODES = ("dense", "onion")


@dataclass(frozen=True)
class OnionParams:
    """
    Parameters for onion (edge-anchored) slot generation.

    Attributes:
        slot_size: Spacing between candidate anchors, minutes
        layer: How many anchors to try from each edge of the day
        disable_back_slots: Only anchor at the start of the day
        allow_overlap: Minutes a front slot may spill past closing time
    """
    slot_size: int = 60
    layer: int = 2
    disable_back_slots: bool = False
    allow_overlap: int = 0

    def __post_init__(self):
        if self.slot_size <= 0:
            raise ValueError(f"slot_size must be positive, got {self.slot_size}")
        if self.layer < 0:
            raise ValueError(f"layer must be >= 0, got {self.layer}")
        if self.allow_overlap < 0:
            raise ValueError(f"allow_overlap must be >= 0, got {self.allow_overlap}")


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for the availability engine.

    Attributes:
        timezone: Salon local timezone used to turn "HH:MM" into Unix seconds
        max_staff_candidates: Top-N staff (by priority) probed when no staff is requested
        max_workers: Thread pool size for per-staff fan-out
        lead_time_step_minutes: Same-day earliest start is rounded up to this step
        cache_ttl_seconds: Redis TTL for cached salon day windows
        onion: Default onion parameters
    """
    timezone: str = "Asia/Tokyo"
    max_staff_candidates: int = 5
    max_workers: int = 4
    lead_time_step_minutes: int = 10
    cache_ttl_seconds: int = 86400
    onion: OnionParams = field(default_factory=OnionParams)

    def __post_init__(self):
        """Validate configuration."""
        if self.max_staff_candidates <= 0:
            raise ValueError(f"max_staff_candidates must be positive, got {self.max_staff_candidates}")
        if self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if self.lead_time_step_minutes <= 0:
            raise ValueError(f"lead_time_step_minutes must be positive, got {self.lead_time_step_minutes}")
        ZoneInfo(self.timezone)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_engine_config() -> EngineConfig:
    """
    Get engine configuration (singleton).

    Reads the salon timezone and staff fan-out from application settings.
    """
    from ...config import settings

    return EngineConfig(
        timezone=settings.salon_timezone,
        max_staff_candidates=settings.max_staff_candidates,
        max_workers=settings.availability_workers,
    )


# ── Date / time helpers ──────────────────────────────────────────────────


def parse_date(date_str: str) -> date:
    """Parse a strict "YYYY-MM-DD" civil date."""
    if not isinstance(date_str, str) or not DATE_RE.match(date_str):
        raise InvalidDateError(f"Date must be YYYY-MM-DD, got {date_str!r}")
    try:
        return date.fromisoformat(date_str)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date {date_str!r}: {e}") from e


def day_name(day: date) -> str:
    """Lowercase english weekday name ("monday" ... "sunday")."""
    return DAY_NAMES[day.weekday()]


def hour_to_minutes(value: str | None) -> int | None:
    """
    Convert "HH:MM" to minutes since midnight.

    Returns None for anything malformed. "24:00" is accepted as end of day.
    """
    if not value or not isinstance(value, str):
        return None
    match = HOUR_RE.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if minute > 59 or hour > 24 or (hour == 24 and minute != 0):
        return None
    return hour * 60 + minute


def day_start_ts(day: date, tz: ZoneInfo) -> int:
    """Unix seconds of local midnight for day."""
    return int(datetime.combine(day, time.min, tzinfo=tz).timestamp())


def minutes_to_ts(day: date, minutes: int, tz: ZoneInfo) -> int:
    """Unix seconds of day + minutes (wall clock) in tz."""
    local = datetime.combine(day, time.min) + timedelta(minutes=minutes)
    return int(local.replace(tzinfo=tz).timestamp())


def hour_to_ts(day: date, value: str | None, tz: ZoneInfo) -> int | None:
    """Convert "HH:MM" on day to Unix seconds, None when malformed."""
    minutes = hour_to_minutes(value)
    if minutes is None:
        return None
    return minutes_to_ts(day, minutes, tz)


def format_ts(ts: int, tz: ZoneInfo) -> str:
    """Unix seconds to local "HH:MM"."""
    return datetime.fromtimestamp(ts, tz).strftime("%H:%M")
