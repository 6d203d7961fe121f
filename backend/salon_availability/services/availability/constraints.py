# backend/salon_availability/services/availability/constraints.py
"""
Shared constraint evaluation for one staff member on one day.

Calendar Resolver + Block Carver + Occupancy Index combined once.
Dense listing, onion listing and the write-time check all read from a
DayConstraints, so a slot offered by a generator always passes the check.
"""

from dataclasses import dataclass
from datetime import datetime

from .calendar import resolve_window
from .carver import Interval, carve, has_all_day
from .config import EngineConfig, day_start_ts
from .errors import ScheduleConfigMissingError
from .occupancy import OccupancyIndex
from .snapshot import DaySnapshot, DayWindow, SalonScheduleConfig

STAFF_ALL_DAY = "staff_all_day"
OUTSIDE_HOURS = "outside_hours"
STAFF_BLOCK = "staff_block"
RESERVATION_CONFLICT = "reservation_conflict"
CAPACITY_FULL = "capacity_full"


def require_config(snapshot: DaySnapshot) -> SalonScheduleConfig:
    """Salon schedule config, or ScheduleConfigMissingError."""
    config = snapshot.config
    if config is None:
        raise ScheduleConfigMissingError(snapshot.salon_id)
    if config.reservation_interval_minutes <= 0:
        raise ScheduleConfigMissingError(
            snapshot.salon_id,
            f"reservation_interval_minutes must be positive, got {config.reservation_interval_minutes}",
        )
    return config


def build_occupancy(
    snapshot: DaySnapshot,
    config: EngineConfig,
    exclude_reservation_id: int | None = None,
) -> OccupancyIndex:
    salon_config = require_config(snapshot)
    return OccupancyIndex.build(
        snapshot.active_reservations(),
        day_start_ts(snapshot.day, config.tz),
        salon_config.reservation_interval_minutes,
        salon_config.available_sheet,
        exclude_reservation_id=exclude_reservation_id,
    )


@dataclass(frozen=True)
class DayConstraints:
    staff_id: int | None
    window: DayWindow
    open_intervals: tuple[Interval, ...]
    occupancy: OccupancyIndex
    closed_reason: str | None = None

    @classmethod
    def build(
        cls,
        snapshot: DaySnapshot,
        staff_id: int | None,
        config: EngineConfig,
        now: datetime,
        occupancy: OccupancyIndex | None = None,
        exclude_reservation_id: int | None = None,
    ) -> "DayConstraints":
        if occupancy is None:
            occupancy = build_occupancy(snapshot, config, exclude_reservation_id)

        window = resolve_window(snapshot, staff_id, config, now)
        if not window.open:
            return cls(staff_id, window, (), occupancy, window.reason)

        schedules = snapshot.schedules_for(staff_id) if staff_id is not None else []
        if has_all_day(schedules):
            return cls(staff_id, window, (), occupancy, STAFF_ALL_DAY)

        intervals = tuple(carve(window, schedules))
        return cls(staff_id, window, intervals, occupancy, None)

    @property
    def step(self) -> int:
        return self.occupancy.step

    @property
    def is_open(self) -> bool:
        return self.closed_reason is None and bool(self.open_intervals)

    def free_runs(self) -> list[Interval]:
        """
        Erode open intervals against occupancy.

        Walks bucket by bucket; a blocked bucket ends the current run.
        Runs are made of pieces of unblocked buckets only.
        """
        runs: list[Interval] = []
        for interval in self.open_intervals:
            run_start: int | None = None
            for bucket in self.occupancy.buckets(interval.start, interval.end):
                piece_start = max(bucket, interval.start)
                piece_end = min(bucket + self.step, interval.end)
                if self.occupancy.is_blocked(self.staff_id, bucket):
                    if run_start is not None and piece_start > run_start:
                        runs.append(Interval(run_start, piece_start))
                    run_start = None
                    continue
                if run_start is None:
                    run_start = piece_start
            if run_start is not None and interval.end > run_start:
                runs.append(Interval(run_start, interval.end))
        return runs

    def check(self, start: int, end: int, allow_overlap: int = 0) -> str | None:
        """
        Check one candidate [start, end).

        The part past closing (up to allow_overlap minutes) is only checked
        against the window bound.

        Returns:
            None when bookable, otherwise a reason code.
        """
        if self.closed_reason is not None:
            return self.closed_reason
        if not self.open_intervals:
            return STAFF_BLOCK

        window = self.window
        if start < window.start or start >= window.end:
            return OUTSIDE_HOURS
        if end > window.end + allow_overlap * 60:
            return OUTSIDE_HOURS

        inner_end = min(end, window.end)

        if not any(i.contains(start, inner_end) for i in self.open_intervals):
            return STAFF_BLOCK

        for bucket in self.occupancy.buckets(start, inner_end):
            if self.occupancy.staff_count(self.staff_id, bucket) > 0:
                return RESERVATION_CONFLICT
            if self.occupancy.is_salon_full(bucket):
                return CAPACITY_FULL

        return None

    def fits(self, start: int, end: int, allow_overlap: int = 0) -> bool:
        return self.check(start, end, allow_overlap) is None
