# backend/salon_availability/services/availability/snapshot.py
"""
Read snapshot for one salon and one date.

The engine never queries storage itself: the loader (or a test) builds a
DaySnapshot and every computation reads from it only.
"""

from dataclasses import dataclass, field
from datetime import date


ACTIVE_STATUSES = ("pending", "confirmed")
HOLIDAY = "holiday"


@dataclass(frozen=True)
class SalonScheduleConfig:
    reservation_interval_minutes: int
    available_sheet: int
    today_first_later_minutes: int = 0
    reservation_limit_days: int | None = None


@dataclass(frozen=True)
class WeekSchedule:
    """Salon or staff opening hours for one weekday."""
    day_of_week: str
    is_open: bool
    start_hour: str | None = None
    end_hour: str | None = None
    staff_id: int | None = None


@dataclass(frozen=True)
class SalonScheduleException:
    date: str
    type: str = HOLIDAY


@dataclass(frozen=True)
class StaffSchedule:
    """Staff exception: all-day off, or a partial (start_time, end_time) block."""
    staff_id: int
    date: str
    type: str = "other"
    is_all_day: bool = False
    start_time: int | None = None
    end_time: int | None = None

    @property
    def is_block(self) -> bool:
        return (
            not self.is_all_day
            and self.start_time is not None
            and self.end_time is not None
            and self.start_time < self.end_time
        )


@dataclass(frozen=True)
class Reservation:
    id: int
    staff_id: int
    salon_id: int
    start_time: int
    end_time: int
    status: str = "confirmed"

    @property
    def occupies(self) -> bool:
        return self.status in ACTIVE_STATUSES and self.start_time < self.end_time

    def overlaps(self, start: int, end: int) -> bool:
        return self.start_time < end and self.end_time > start


@dataclass(frozen=True)
class StaffMember:
    id: int
    priority: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class DayWindow:
    """Resolved open window; reason is set when closed."""
    open: bool
    start: int = 0
    end: int = 0
    reason: str | None = None

    @classmethod
    def closed(cls, reason: str) -> "DayWindow":
        return cls(open=False, reason=reason)


@dataclass(frozen=True)
class DaySnapshot:
    """
    Everything the engine needs for one salon on one date.

    salon_window, when set, is the cached weekly-hours window and replaces
    salon_week. salon_exceptions are always loaded.
    """
    salon_id: int
    day: date
    config: SalonScheduleConfig | None
    salon_week: WeekSchedule | None = None
    salon_exceptions: tuple[SalonScheduleException, ...] = ()
    staff: tuple[StaffMember, ...] = ()
    staff_week: dict[int, WeekSchedule] = field(default_factory=dict)
    staff_schedules: tuple[StaffSchedule, ...] = ()
    reservations: tuple[Reservation, ...] = ()
    salon_window: DayWindow | None = None

    @property
    def date_str(self) -> str:
        return self.day.isoformat()

    def has_salon_holiday(self) -> bool:
        return any(
            exc.type == HOLIDAY and exc.date == self.date_str
            for exc in self.salon_exceptions
        )

    def get_staff(self, staff_id: int) -> StaffMember | None:
        for member in self.staff:
            if member.id == staff_id:
                return member
        return None

    def staff_week_for(self, staff_id: int) -> WeekSchedule | None:
        return self.staff_week.get(staff_id)

    def schedules_for(self, staff_id: int) -> list[StaffSchedule]:
        return [
            s for s in self.staff_schedules
            if s.staff_id == staff_id and s.date == self.date_str
        ]

    def active_reservations(self) -> list[Reservation]:
        return [r for r in self.reservations if r.occupies]

    def reservations_for(self, staff_id: int) -> list[Reservation]:
        return [r for r in self.active_reservations() if r.staff_id == staff_id]
