# backend/salon_availability/services/availability/errors.py
"""
Availability engine errors.

Read path (slot listing) turns input errors into an empty result.
Write path (slot check) lets them propagate.
Missing salon configuration always propagates.
"""


class AvailabilityError(Exception):
    """Base class for availability engine errors."""


class InvalidDateError(AvailabilityError, ValueError):
    """Date is not a valid "YYYY-MM-DD" civil date."""


class InvalidSlotError(AvailabilityError, ValueError):
    """Candidate slot is malformed (start >= end)."""


class ScheduleConfigMissingError(AvailabilityError):
    """Salon has no usable schedule config (granularity / capacity)."""

    def __init__(self, salon_id: int, detail: str = "schedule config missing"):
        self.salon_id = salon_id
        super().__init__(f"Salon {salon_id}: {detail}")
