# backend/salon_availability/services/availability/service.py
"""
Database-facing operations.

find_available_slots  - read path: bad input → empty list
check_slot_available  - write path: bad input → exception

Both load a fresh DaySnapshot. Only the read path uses the Redis cache,
and only for the salon weekly hours; holidays are always read fresh.
"""

import logging
from datetime import datetime

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from .calendar import resolve_week_window
from .config import EngineConfig, OnionParams, get_engine_config, parse_date
from .engine import StaffSlots, compute_available_slots
from .errors import InvalidDateError
from .loader import load_day_snapshot
from .redis_store import SalonWindowRedisStore
from .validator import SlotCheck, check_slot

logger = logging.getLogger(__name__)


def find_available_slots(
    db: Session,
    salon_id: int,
    date_str: str,
    duration_minutes: int,
    staff_id: int | None = None,
    mode: str = "dense",
    onion: OnionParams | None = None,
    config: EngineConfig | None = None,
    redis: Redis | None = None,
    now: datetime | None = None,
) -> list[StaffSlots]:
    """
    List bookable slots per staff.

    Returns:
        Empty list for a malformed date or non-positive duration.
    """
    config = config or get_engine_config()

    try:
        day = parse_date(date_str)
    except InvalidDateError:
        logger.debug("Rejected date %r for salon %s", date_str, salon_id)
        return []

    if duration_minutes <= 0:
        return []

    store = SalonWindowRedisStore(redis, config) if redis is not None else None
    cached = _get_cached_window(store, salon_id, day)

    snapshot = load_day_snapshot(
        db, salon_id, day, staff_id=staff_id, config=config, salon_window=cached,
    )

    if store is not None and cached is None:
        _store_window(store, salon_id, day, resolve_week_window(snapshot, config))

    return compute_available_slots(
        snapshot,
        duration_minutes,
        staff_id=staff_id,
        mode=mode,
        onion=onion,
        config=config,
        now=now,
    )


def check_slot_available(
    db: Session,
    salon_id: int,
    staff_id: int,
    date_str: str,
    start: int,
    end: int,
    allow_overlap: int | None = None,
    exclude_reservation_id: int | None = None,
    config: EngineConfig | None = None,
    now: datetime | None = None,
) -> SlotCheck:
    """
    Write-time check for one slot. Run inside the reservation write transaction.

    Raises:
        InvalidDateError, InvalidSlotError, ScheduleConfigMissingError
    """
    config = config or get_engine_config()
    day = parse_date(date_str)

    snapshot = load_day_snapshot(db, salon_id, day, staff_id=staff_id, config=config)
    return check_slot(
        snapshot,
        staff_id,
        start,
        end,
        allow_overlap=allow_overlap,
        exclude_reservation_id=exclude_reservation_id,
        config=config,
        now=now,
    )


# ── Cache helpers ────────────────────────────────────────────────────────


def _get_cached_window(store: SalonWindowRedisStore | None, salon_id: int, day):
    if store is None:
        return None
    try:
        return store.get_window(salon_id, day)
    except RedisError:
        logger.exception("Salon window cache read failed for salon=%s date=%s", salon_id, day)
        return None


def _store_window(store: SalonWindowRedisStore, salon_id: int, day, window) -> None:
    try:
        store.store_window(salon_id, day, window)
    except RedisError:
        logger.exception("Salon window cache write failed for salon=%s date=%s", salon_id, day)
