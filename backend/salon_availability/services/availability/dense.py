# backend/salon_availability/services/availability/dense.py
"""
Slot Generator (dense mode).

Every start time on the granularity step, from the start of each free run,
whose full duration fits inside that run.
"""

from dataclasses import dataclass

from .constraints import DayConstraints


@dataclass(frozen=True)
class Slot:
    start: int
    end: int
    has_overlap: bool = False

    def overlaps(self, other: "Slot") -> bool:
        return self.start < other.end and self.end > other.start


def generate_dense_slots(constraints: DayConstraints, duration_minutes: int) -> list[Slot]:
    """
    Enumerate all bookable slots of duration_minutes.

    Returns:
        Slots sorted by start. Empty list when the day is closed.
    """
    if duration_minutes <= 0 or not constraints.is_open:
        return []

    duration = duration_minutes * 60
    step = constraints.step
    slots: list[Slot] = []

    for run in constraints.free_runs():
        if run.length < duration:
            continue
        t = run.start
        while t + duration <= run.end:
            slots.append(Slot(t, t + duration))
            t += step

    return slots
