# backend/salon_availability/services/availability/calendar.py
"""
Calendar Resolver: effective open window for salon (+ staff) on a date.

Contains:
✓ salon week schedule for the weekday
✓ salon holiday exception for the date
✓ staff week schedule (intersection with salon hours)
✓ same-day lead time and booking horizon

Does NOT contain:
✗ Staff partial-day blocks (Block Carver)
✗ Reservations (Occupancy Index)

Staff policy, identical for listing and write-time checks:
  - no staff week row            → follow salon hours
  - open row, unparsable hours   → follow salon hours
  - row with is_open = False     → staff closed that day
"""

import logging
import math
from datetime import datetime, timedelta

from .config import EngineConfig, day_name, hour_to_ts
from .snapshot import DaySnapshot, DayWindow

logger = logging.getLogger(__name__)

SALON_CLOSED = "salon_closed"
SALON_HOLIDAY = "salon_holiday"
STAFF_DAY_OFF = "staff_day_off"
OUTSIDE_HORIZON = "outside_horizon"
EMPTY_WINDOW = "empty_window"


def resolve_salon_window(snapshot: DaySnapshot, config: EngineConfig) -> DayWindow:
    """Salon-level window for the snapshot date (independent of now)."""
    if snapshot.has_salon_holiday():
        return DayWindow.closed(SALON_HOLIDAY)
    return resolve_week_window(snapshot, config)


def resolve_week_window(snapshot: DaySnapshot, config: EngineConfig) -> DayWindow:
    """Salon weekly hours for the snapshot date, ignoring holidays (cacheable)."""
    if snapshot.salon_window is not None:
        return snapshot.salon_window

    week = snapshot.salon_week
    if week is None or not week.is_open or week.day_of_week != day_name(snapshot.day):
        return DayWindow.closed(SALON_CLOSED)

    tz = config.tz
    start = hour_to_ts(snapshot.day, week.start_hour, tz)
    end = hour_to_ts(snapshot.day, week.end_hour, tz)
    if start is None or end is None:
        logger.warning(
            "Salon %s has unparsable hours on %s: %r-%r",
            snapshot.salon_id, week.day_of_week, week.start_hour, week.end_hour,
        )
        return DayWindow.closed(SALON_CLOSED)
    if start >= end:
        return DayWindow.closed(EMPTY_WINDOW)

    return DayWindow(open=True, start=start, end=end)


def resolve_window(
    snapshot: DaySnapshot,
    staff_id: int | None,
    config: EngineConfig,
    now: datetime,
) -> DayWindow:
    """
    Effective window for staff (or the salon when staff_id is None).

    Returns:
        DayWindow; open=False with a reason code when nothing can be booked.
    """
    window = resolve_salon_window(snapshot, config)
    if not window.open:
        return window

    start, end = window.start, window.end

    if staff_id is not None:
        week = snapshot.staff_week_for(staff_id)
        if week is not None and week.day_of_week == day_name(snapshot.day):
            if not week.is_open:
                return DayWindow.closed(STAFF_DAY_OFF)
            staff_start = hour_to_ts(snapshot.day, week.start_hour, config.tz)
            staff_end = hour_to_ts(snapshot.day, week.end_hour, config.tz)
            if staff_start is not None and staff_end is not None:
                start = max(start, staff_start)
                end = min(end, staff_end)
            else:
                logger.debug(
                    "Staff %s hours unparsable on %s, following salon hours",
                    staff_id, week.day_of_week,
                )

    start = _apply_horizon(snapshot, start, config, now)
    if start is None:
        return DayWindow.closed(OUTSIDE_HORIZON)

    if start >= end:
        return DayWindow.closed(EMPTY_WINDOW)

    return DayWindow(open=True, start=start, end=end)


# ── Helpers ──────────────────────────────────────────────────────────────


def _apply_horizon(
    snapshot: DaySnapshot,
    start: int,
    config: EngineConfig,
    now: datetime,
) -> int | None:
    """
    Clip window start by booking horizon.

    - past dates: closed
    - beyond reservation_limit_days: closed
    - today: earliest start = now + lead time, rounded up to lead_time_step_minutes
    """
    today = now.astimezone(config.tz).date()
    if snapshot.day < today:
        return None

    salon_config = snapshot.config
    limit = salon_config.reservation_limit_days if salon_config else None
    if limit is not None and snapshot.day > today + timedelta(days=limit):
        return None

    if snapshot.day == today:
        lead_min = salon_config.today_first_later_minutes if salon_config else 0
        step = config.lead_time_step_minutes * 60
        earliest = now.timestamp() + lead_min * 60
        aligned = math.ceil(earliest / step) * step
        start = max(start, int(aligned))

    return start
