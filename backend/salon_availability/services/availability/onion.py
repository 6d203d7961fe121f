# backend/salon_availability/services/availability/onion.py
"""
Onion Generator: a few slots anchored at both edges of the day.

Front layer: start = window_start + i * slot_size   (i < layer)
Back layer:  end   = window_end   - i * slot_size   (i < layer)

Front slots may spill past closing by allow_overlap minutes and are flagged
has_overlap. Back slots never spill. On conflict the front slot wins.
"""

from .config import OnionParams
from .constraints import DayConstraints
from .dense import Slot


def generate_onion_slots(
    constraints: DayConstraints,
    duration_minutes: int,
    params: OnionParams,
) -> list[Slot]:
    """
    Returns:
        Up to 2 * layer slots sorted by start.
    """
    if duration_minutes <= 0 or not constraints.is_open:
        return []

    window = constraints.window
    duration = duration_minutes * 60
    step = params.slot_size * 60

    front: list[Slot] = []
    for i in range(params.layer):
        start = window.start + i * step
        end = start + duration
        if constraints.fits(start, end, params.allow_overlap):
            front.append(Slot(start, end, has_overlap=end > window.end))

    if params.disable_back_slots:
        return sorted(front, key=lambda s: s.start)

    back: list[Slot] = []
    for i in range(params.layer):
        end = window.end - i * step
        start = end - duration
        if constraints.fits(start, end):
            back.append(Slot(start, end))

    accepted = list(front)
    for slot in sorted(back, key=lambda s: s.start):
        if any(slot.overlaps(other) for other in accepted):
            continue
        accepted.append(slot)

    return sorted(accepted, key=lambda s: s.start)
