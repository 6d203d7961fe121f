# backend/salon_availability/services/availability/__init__.py
"""
Reservation availability engine.

Pipeline: Calendar Resolver → Block Carver → Occupancy Index
          → Slot Generator (dense | onion) / Slot Validator
"""

from .config import EngineConfig, OnionParams, get_engine_config, parse_date
from .errors import (
    AvailabilityError,
    InvalidDateError,
    InvalidSlotError,
    ScheduleConfigMissingError,
)
from .snapshot import DaySnapshot
from .engine import StaffSlots, compute_available_slots
from .validator import SlotCheck, check_slot, is_slot_available
from .loader import load_day_snapshot
from .redis_store import SalonWindowRedisStore
from .invalidator import invalidate_salon_cache
from .service import check_slot_available, find_available_slots

__all__ = [
    "EngineConfig",
    "OnionParams",
    "get_engine_config",
    "parse_date",
    "AvailabilityError",
    "InvalidDateError",
    "InvalidSlotError",
    "ScheduleConfigMissingError",
    "DaySnapshot",
    "StaffSlots",
    "compute_available_slots",
    "SlotCheck",
    "check_slot",
    "is_slot_available",
    "load_day_snapshot",
    "SalonWindowRedisStore",
    "invalidate_salon_cache",
    "check_slot_available",
    "find_available_slots",
]
