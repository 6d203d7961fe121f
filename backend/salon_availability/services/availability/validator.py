# backend/salon_availability/services/availability/validator.py
"""
Slot Validator: write-time gate for one candidate slot.

Call inside the write transaction right before inserting the reservation.
Uses the same DayConstraints as the generators.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .config import EngineConfig, get_engine_config
from .constraints import DayConstraints, require_config
from .errors import InvalidSlotError
from .snapshot import DaySnapshot

logger = logging.getLogger(__name__)

STAFF_UNAVAILABLE = "staff_unavailable"


@dataclass(frozen=True)
class SlotCheck:
    available: bool
    reason: str | None = None


def check_slot(
    snapshot: DaySnapshot,
    staff_id: int,
    start: int,
    end: int,
    allow_overlap: int | None = None,
    exclude_reservation_id: int | None = None,
    config: EngineConfig | None = None,
    now: datetime | None = None,
) -> SlotCheck:
    """
    Check whether [start, end) is still bookable for staff_id.

    allow_overlap defaults to config.onion.allow_overlap, the same allowance
    the onion generator lists with.

    Raises:
        InvalidSlotError: start >= end or negative allow_overlap
        ScheduleConfigMissingError: salon has no schedule config
    """
    if start >= end:
        raise InvalidSlotError(f"Slot start must be before end: {start} >= {end}")

    config = config or get_engine_config()
    if allow_overlap is None:
        allow_overlap = config.onion.allow_overlap
    if allow_overlap < 0:
        raise InvalidSlotError(f"allow_overlap must be >= 0, got {allow_overlap}")
    now = now or datetime.now(config.tz)
    require_config(snapshot)

    member = snapshot.get_staff(staff_id)
    if member is None or not member.is_active:
        return _reject(snapshot, staff_id, STAFF_UNAVAILABLE)

    constraints = DayConstraints.build(
        snapshot,
        staff_id,
        config,
        now,
        exclude_reservation_id=exclude_reservation_id,
    )
    reason = constraints.check(start, end, allow_overlap)
    if reason is not None:
        return _reject(snapshot, staff_id, reason)

    return SlotCheck(available=True)


def is_slot_available(
    snapshot: DaySnapshot,
    staff_id: int,
    start: int,
    end: int,
    **kwargs,
) -> bool:
    """Boolean form of check_slot."""
    return check_slot(snapshot, staff_id, start, end, **kwargs).available


def _reject(snapshot: DaySnapshot, staff_id: int, reason: str) -> SlotCheck:
    logger.info(
        "Slot rejected: salon=%s staff=%s date=%s reason=%s",
        snapshot.salon_id, staff_id, snapshot.date_str, reason,
    )
    return SlotCheck(available=False, reason=reason)
