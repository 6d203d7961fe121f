# backend/salon_availability/services/availability/engine.py
"""
Availability listing over a DaySnapshot.

Steps:
1. Validate duration / mode, require salon config
2. Salon-level window (closed → nothing to do)
3. Candidate staff: requested one, or top-N active by priority
4. Per-staff constraints + generator, fanned out on a thread pool
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime

from .calendar import resolve_salon_window
from .config import MODES, EngineConfig, OnionParams, get_engine_config
from .constraints import DayConstraints, build_occupancy, require_config
from .dense import Slot, generate_dense_slots
from .occupancy import OccupancyIndex
from .onion import generate_onion_slots
from .snapshot import DaySnapshot, StaffMember

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaffSlots:
    staff_id: int
    slots: list[Slot] = field(default_factory=list)


def compute_available_slots(
    snapshot: DaySnapshot,
    duration_minutes: int,
    staff_id: int | None = None,
    mode: str = "dense",
    onion: OnionParams | None = None,
    config: EngineConfig | None = None,
    now: datetime | None = None,
) -> list[StaffSlots]:
    """
    Compute bookable slots for one salon on one date.

    Returns:
        One entry per staff with at least one slot, in priority order.
        Empty list when the salon is closed or nothing fits.

    Raises:
        ValueError: unknown mode
        ScheduleConfigMissingError: salon has no schedule config
    """
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")

    config = config or get_engine_config()
    now = now or datetime.now(config.tz)
    onion = onion or config.onion

    if duration_minutes <= 0:
        logger.debug("Non-positive duration %s, no slots", duration_minutes)
        return []

    require_config(snapshot)

    salon_window = resolve_salon_window(snapshot, config)
    if not salon_window.open:
        logger.debug(
            "Salon %s closed on %s: %s",
            snapshot.salon_id, snapshot.date_str, salon_window.reason,
        )
        return []

    candidates = select_staff(snapshot, staff_id, config.max_staff_candidates)
    if not candidates:
        return []

    occupancy = build_occupancy(snapshot, config)

    def evaluate(member: StaffMember) -> StaffSlots:
        return StaffSlots(
            staff_id=member.id,
            slots=_generate(snapshot, member.id, occupancy, duration_minutes, mode, onion, config, now),
        )

    if len(candidates) == 1:
        results = [evaluate(candidates[0])]
    else:
        workers = min(config.max_workers, len(candidates))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(evaluate, candidates))

    return [r for r in results if r.slots]


def select_staff(
    snapshot: DaySnapshot,
    staff_id: int | None,
    limit: int,
) -> list[StaffMember]:
    """Requested staff if active, else top-N active staff by priority (desc), then id."""
    if staff_id is not None:
        member = snapshot.get_staff(staff_id)
        return [member] if member is not None and member.is_active else []

    active = [m for m in snapshot.staff if m.is_active]
    active.sort(key=lambda m: (-(m.priority or 0), m.id))
    return active[:limit]


def _generate(
    snapshot: DaySnapshot,
    staff_id: int,
    occupancy: OccupancyIndex,
    duration_minutes: int,
    mode: str,
    onion: OnionParams,
    config: EngineConfig,
    now: datetime,
) -> list[Slot]:
    constraints = DayConstraints.build(snapshot, staff_id, config, now, occupancy=occupancy)
    if not constraints.is_open:
        logger.debug(
            "Staff %s unavailable on %s: %s",
            staff_id, snapshot.date_str, constraints.closed_reason,
        )
        return []

    if mode == "onion":
        return generate_onion_slots(constraints, duration_minutes, onion)
    return generate_dense_slots(constraints, duration_minutes)
