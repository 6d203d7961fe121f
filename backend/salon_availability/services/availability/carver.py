# backend/salon_availability/services/availability/carver.py
"""
Block Carver: subtract staff partial-day blocks from the open window.

Any all-day staff exception closes the whole day.
"""

from typing import Iterable, NamedTuple

from .snapshot import DayWindow, StaffSchedule


class Interval(NamedTuple):
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end


def has_all_day(schedules: Iterable[StaffSchedule]) -> bool:
    return any(s.is_all_day for s in schedules)


def carve(window: DayWindow, schedules: Iterable[StaffSchedule]) -> list[Interval]:
    """
    Split window around every partial block.

    Returns:
        Disjoint open intervals sorted by start. Empty list = no time left.
    """
    if not window.open:
        return []

    schedules = list(schedules)
    if has_all_day(schedules):
        return []

    intervals = [Interval(window.start, window.end)]

    for block in schedules:
        if not block.is_block:
            continue
        intervals = subtract(intervals, block.start_time, block.end_time)

    return sorted(i for i in intervals if i.length > 0)


def subtract(intervals: list[Interval], block_start: int, block_end: int) -> list[Interval]:
    """Remove [block_start, block_end) from each interval."""
    result: list[Interval] = []
    for interval in intervals:
        if block_end <= interval.start or block_start >= interval.end:
            result.append(interval)
            continue
        if interval.start < block_start:
            result.append(Interval(interval.start, block_start))
        if block_end < interval.end:
            result.append(Interval(block_end, interval.end))
    return result
