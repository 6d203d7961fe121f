# backend/salon_availability/services/availability/occupancy.py
"""
Occupancy Index: reservations bucketed on the reservation-interval grid.

Buckets are reservation_interval_minutes wide and aligned to local midnight.
A reservation counts in every bucket it overlaps.

Two maps:
  staff_counts[staff_id][bucket_start] → reservations of that staff
  salon_counts[bucket_start]           → reservations of any staff

Bucket is blocked for a staff when:
  staff_counts > 0  (one customer per staff per bucket)
  OR salon_counts >= available_sheet  (salon-wide cap)
"""

from collections import Counter, defaultdict
from typing import Iterable, Iterator

from .snapshot import Reservation


class OccupancyIndex:
    """Read-only after build; safe to share between staff evaluations."""

    def __init__(
        self,
        day_start: int,
        interval_minutes: int,
        available_sheet: int,
        staff_counts: dict[int, Counter] | None = None,
        salon_counts: Counter | None = None,
    ):
        if interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
        self.day_start = day_start
        self.interval_minutes = interval_minutes
        self.step = interval_minutes * 60
        self.available_sheet = available_sheet
        self.staff_counts = staff_counts or {}
        self.salon_counts = salon_counts or Counter()

    @classmethod
    def build(
        cls,
        reservations: Iterable[Reservation],
        day_start: int,
        interval_minutes: int,
        available_sheet: int,
        exclude_reservation_id: int | None = None,
    ) -> "OccupancyIndex":
        index = cls(day_start, interval_minutes, available_sheet)
        staff_counts: dict[int, Counter] = defaultdict(Counter)

        for reservation in reservations:
            if not reservation.occupies:
                continue
            if exclude_reservation_id is not None and reservation.id == exclude_reservation_id:
                continue
            for bucket in index.buckets(reservation.start_time, reservation.end_time):
                staff_counts[reservation.staff_id][bucket] += 1
                index.salon_counts[bucket] += 1

        index.staff_counts = dict(staff_counts)
        return index

    # ── Grid ─────────────────────────────────────────────────────────────

    def bucket_of(self, ts: int) -> int:
        """Start of the bucket containing ts."""
        return self.day_start + ((ts - self.day_start) // self.step) * self.step

    def buckets(self, start: int, end: int) -> Iterator[int]:
        """Bucket starts overlapping [start, end)."""
        if start >= end:
            return
        bucket = self.bucket_of(start)
        while bucket < end:
            yield bucket
            bucket += self.step

    # ── Queries ──────────────────────────────────────────────────────────

    def staff_count(self, staff_id: int | None, bucket: int) -> int:
        if staff_id is None:
            return 0
        counts = self.staff_counts.get(staff_id)
        return counts[bucket] if counts else 0

    def salon_count(self, bucket: int) -> int:
        return self.salon_counts[bucket]

    def is_salon_full(self, bucket: int) -> bool:
        return self.salon_count(bucket) >= self.available_sheet

    def is_blocked(self, staff_id: int | None, bucket: int) -> bool:
        return self.staff_count(staff_id, bucket) > 0 or self.is_salon_full(bucket)
