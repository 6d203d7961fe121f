from datetime import date, datetime
from itertools import count
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from salon_availability.models.generated import Base
from salon_availability.services.availability.config import EngineConfig, day_name, hour_to_ts
from salon_availability.services.availability.snapshot import (
    DaySnapshot,
    Reservation,
    SalonScheduleConfig,
    SalonScheduleException,
    StaffMember,
    StaffSchedule,
    WeekSchedule,
)

TZ = ZoneInfo("Asia/Tokyo")
DAY = date(2026, 3, 2)  # Monday


@pytest.fixture
def config():
    return EngineConfig(timezone="Asia/Tokyo", max_workers=2)


@pytest.fixture
def now():
    return datetime(2026, 2, 1, 9, 0, tzinfo=TZ)


@pytest.fixture
def at():
    """"HH:MM" on DAY → Unix seconds."""
    def _at(hhmm: str, day: date = DAY) -> int:
        return hour_to_ts(day, hhmm, TZ)
    return _at


@pytest.fixture
def block(at):
    def _block(staff_id: int, start: str, end: str, type: str = "other") -> StaffSchedule:
        return StaffSchedule(
            staff_id=staff_id,
            date=DAY.isoformat(),
            type=type,
            start_time=at(start),
            end_time=at(end),
        )
    return _block


@pytest.fixture
def all_day():
    def _all_day(staff_id: int, type: str = "holiday") -> StaffSchedule:
        return StaffSchedule(staff_id=staff_id, date=DAY.isoformat(), type=type, is_all_day=True)
    return _all_day


@pytest.fixture
def booking(at):
    ids = count(1)

    def _booking(staff_id: int, start: str, end: str, status: str = "confirmed", salon_id: int = 1) -> Reservation:
        return Reservation(
            id=next(ids),
            staff_id=staff_id,
            salon_id=salon_id,
            start_time=at(start),
            end_time=at(end),
            status=status,
        )
    return _booking


@pytest.fixture
def staff_week():
    def _staff_week(staff_id: int, start: str | None, end: str | None, is_open: bool = True) -> WeekSchedule:
        return WeekSchedule(
            day_of_week=day_name(DAY),
            is_open=is_open,
            start_hour=start,
            end_hour=end,
            staff_id=staff_id,
        )
    return _staff_week


@pytest.fixture
def make_snapshot():
    def _make(
        hours: tuple[str, str] | None = ("08:00", "19:00"),
        interval: int = 30,
        sheet: int = 3,
        staff=(1,),
        staff_week=(),
        schedules=(),
        reservations=(),
        holiday: bool = False,
        with_config: bool = True,
        today_first_later_minutes: int = 0,
        reservation_limit_days: int | None = None,
    ) -> DaySnapshot:
        members = tuple(
            m if isinstance(m, StaffMember) else StaffMember(id=m)
            for m in staff
        )
        salon_week = None
        if hours is not None:
            salon_week = WeekSchedule(
                day_of_week=day_name(DAY),
                is_open=True,
                start_hour=hours[0],
                end_hour=hours[1],
            )
        salon_config = None
        if with_config:
            salon_config = SalonScheduleConfig(
                reservation_interval_minutes=interval,
                available_sheet=sheet,
                today_first_later_minutes=today_first_later_minutes,
                reservation_limit_days=reservation_limit_days,
            )
        return DaySnapshot(
            salon_id=1,
            day=DAY,
            config=salon_config,
            salon_week=salon_week,
            salon_exceptions=(SalonScheduleException(date=DAY.isoformat()),) if holiday else (),
            staff=members,
            staff_week={w.staff_id: w for w in staff_week},
            staff_schedules=tuple(schedules),
            reservations=tuple(reservations),
        )
    return _make


# ── Database ─────────────────────────────────────────────────────────────


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(db_engine):
    session = sessionmaker(bind=db_engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
