# backend/salon_availability/services/availability/loader.py
"""
Build a DaySnapshot from the database.

One indexed query per table: staff-scoped tables are read with
IN (candidate staff ids), reservations salon-wide by time range.
Archived rows never enter the snapshot.
"""

from datetime import date, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from .config import EngineConfig, day_name, day_start_ts, get_engine_config
from .snapshot import (
    ACTIVE_STATUSES,
    HOLIDAY,
    DaySnapshot,
    DayWindow,
    Reservation,
    SalonScheduleConfig,
    SalonScheduleException,
    StaffMember,
    StaffSchedule,
    WeekSchedule,
)


def load_day_snapshot(
    db: Session,
    salon_id: int,
    day: date,
    staff_id: int | None = None,
    config: EngineConfig | None = None,
    salon_window: DayWindow | None = None,
) -> DaySnapshot:
    """
    Load everything needed for salon_id on day.

    Args:
        staff_id: Load only this staff member; None = top-N active by priority
        salon_window: Cached weekly-hours window; skips the salon week read
    """
    config = config or get_engine_config()
    weekday = day_name(day)
    date_str = day.isoformat()

    salon_config = _get_salon_config(db, salon_id)

    salon_week = None
    if salon_window is None:
        salon_week = _get_salon_week(db, salon_id, weekday)
    salon_exceptions = tuple(_get_salon_exceptions(db, salon_id, date_str))

    staff = _get_staff(db, salon_id, staff_id, config.max_staff_candidates)
    staff_ids = [m.id for m in staff]

    staff_week = {}
    staff_schedules: tuple[StaffSchedule, ...] = ()
    if staff_ids:
        staff_week = _get_staff_week(db, staff_ids, weekday)
        staff_schedules = tuple(_get_staff_schedules(db, staff_ids, date_str))

    day_start = day_start_ts(day, config.tz)
    day_end = day_start_ts(day + timedelta(days=1), config.tz)
    reservations = tuple(_get_salon_reservations(db, salon_id, day_start, day_end))

    return DaySnapshot(
        salon_id=salon_id,
        day=day,
        config=salon_config,
        salon_week=salon_week,
        salon_exceptions=salon_exceptions,
        staff=tuple(staff),
        staff_week=staff_week,
        staff_schedules=staff_schedules,
        reservations=reservations,
        salon_window=salon_window,
    )


# ── Database helpers ─────────────────────────────────────────────────────


def _get_salon_config(db: Session, salon_id: int) -> SalonScheduleConfig | None:
    """Get active schedule config for salon."""
    from ...models.generated import SalonScheduleConfigs

    row = (
        db.query(SalonScheduleConfigs)
        .filter(
            SalonScheduleConfigs.salon_id == salon_id,
            SalonScheduleConfigs.is_archive == 0,
        )
        .first()
    )
    if row is None:
        return None
    return SalonScheduleConfig(
        reservation_interval_minutes=row.reservation_interval_minutes,
        available_sheet=row.available_sheet,
        today_first_later_minutes=row.today_first_later_minutes or 0,
        reservation_limit_days=row.reservation_limit_days,
    )


def _get_salon_week(db: Session, salon_id: int, weekday: str) -> WeekSchedule | None:
    """Get salon opening hours for weekday."""
    from ...models.generated import SalonWeekSchedules

    row = (
        db.query(SalonWeekSchedules)
        .filter(
            SalonWeekSchedules.salon_id == salon_id,
            SalonWeekSchedules.day_of_week == weekday,
            SalonWeekSchedules.is_archive == 0,
        )
        .first()
    )
    if row is None:
        return None
    return WeekSchedule(
        day_of_week=row.day_of_week,
        is_open=bool(row.is_open),
        start_hour=row.start_hour,
        end_hour=row.end_hour,
    )


def _get_salon_exceptions(db: Session, salon_id: int, date_str: str) -> list[SalonScheduleException]:
    """Get salon holiday exceptions for date."""
    from ...models.generated import SalonScheduleExceptions

    rows = (
        db.query(SalonScheduleExceptions)
        .filter(
            SalonScheduleExceptions.salon_id == salon_id,
            SalonScheduleExceptions.date == date_str,
            SalonScheduleExceptions.type == HOLIDAY,
            SalonScheduleExceptions.is_archive == 0,
        )
        .all()
    )
    return [SalonScheduleException(date=r.date, type=r.type) for r in rows]


def _get_staff(
    db: Session,
    salon_id: int,
    staff_id: int | None,
    limit: int,
) -> list[StaffMember]:
    """Get requested staff, or top-N active staff of salon by priority."""
    from ...models.generated import Staff, StaffConfigs

    priority = func.coalesce(StaffConfigs.priority, 0)
    query = (
        db.query(Staff.id, priority.label("priority"))
        .outerjoin(
            StaffConfigs,
            (StaffConfigs.staff_id == Staff.id) & (StaffConfigs.is_archive == 0),
        )
        .filter(
            Staff.salon_id == salon_id,
            Staff.is_active == 1,
            Staff.is_archive == 0,
        )
    )
    if staff_id is not None:
        query = query.filter(Staff.id == staff_id)
    else:
        query = query.order_by(priority.desc(), Staff.id).limit(limit)

    return [
        StaffMember(id=row.id, priority=row.priority, is_active=True)
        for row in query.all()
    ]


def _get_staff_week(db: Session, staff_ids: list[int], weekday: str) -> dict[int, WeekSchedule]:
    """Get weekday schedule rows for staff, keyed by staff id."""
    from ...models.generated import StaffWeekSchedules

    rows = (
        db.query(StaffWeekSchedules)
        .filter(
            StaffWeekSchedules.staff_id.in_(staff_ids),
            StaffWeekSchedules.day_of_week == weekday,
            StaffWeekSchedules.is_archive == 0,
        )
        .all()
    )
    return {
        r.staff_id: WeekSchedule(
            day_of_week=r.day_of_week,
            is_open=bool(r.is_open),
            start_hour=r.start_hour,
            end_hour=r.end_hour,
            staff_id=r.staff_id,
        )
        for r in rows
    }


def _get_staff_schedules(db: Session, staff_ids: list[int], date_str: str) -> list[StaffSchedule]:
    """Get staff exceptions (all-day and partial) for date."""
    from ...models.generated import StaffSchedules

    rows = (
        db.query(StaffSchedules)
        .filter(
            StaffSchedules.staff_id.in_(staff_ids),
            StaffSchedules.date == date_str,
            StaffSchedules.is_archive == 0,
        )
        .all()
    )
    return [
        StaffSchedule(
            staff_id=r.staff_id,
            date=r.date,
            type=r.type,
            is_all_day=bool(r.is_all_day),
            start_time=r.start_time_unix,
            end_time=r.end_time_unix,
        )
        for r in rows
    ]


def _get_salon_reservations(
    db: Session,
    salon_id: int,
    day_start: int,
    day_end: int,
) -> list[Reservation]:
    """Get pending/confirmed reservations of salon overlapping [day_start, day_end)."""
    from ...models.generated import Reservations

    rows = (
        db.query(Reservations)
        .filter(
            Reservations.salon_id == salon_id,
            Reservations.start_time_unix < day_end,
            Reservations.end_time_unix > day_start,
            Reservations.status.in_(ACTIVE_STATUSES),
            Reservations.is_archive == 0,
        )
        .all()
    )
    return [
        Reservation(
            id=r.id,
            staff_id=r.staff_id,
            salon_id=r.salon_id,
            start_time=r.start_time_unix,
            end_time=r.end_time_unix,
            status=r.status,
        )
        for r in rows
    ]
