from datetime import datetime, timedelta

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from salon_availability.database import get_db
from salon_availability.main import app
from salon_availability.models.generated import (
    Reservations,
    SalonScheduleConfigs,
    Salons,
    SalonWeekSchedules,
    Staff,
)
from salon_availability.redis_client import get_redis
from salon_availability.services.availability.config import day_name, get_engine_config, hour_to_ts


@pytest.fixture
def target_day():
    tz = get_engine_config().tz
    return datetime.now(tz).date() + timedelta(days=7)


@pytest.fixture
def ts(target_day):
    tz = get_engine_config().tz

    def _ts(hhmm: str) -> int:
        return hour_to_ts(target_day, hhmm, tz)
    return _ts


@pytest.fixture
def client(db_engine, target_day, ts):
    Session = sessionmaker(bind=db_engine, autoflush=False)

    with Session() as db:
        db.add(Salons(id=1, name="Salon A"))
        db.add(SalonScheduleConfigs(salon_id=1, reservation_interval_minutes=60, available_sheet=1))
        db.add(SalonWeekSchedules(
            salon_id=1, day_of_week=day_name(target_day), is_open=1, start_hour="08:00", end_hour="19:00",
        ))
        db.add(Salons(id=2, name="No config"))
        db.add(Staff(id=1, salon_id=1, name="Aoi"))
        db.add(Reservations(
            salon_id=1, staff_id=1, date=target_day.isoformat(),
            start_time_unix=ts("12:00"), end_time_unix=ts("13:00"), status="confirmed",
        ))
        db.commit()

    def override_get_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    fake = fakeredis.FakeRedis(server=fakeredis.FakeServer())
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: fake
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_dense_slots(client, target_day, ts):
    resp = client.get("/availability/slots", params={
        "salon_id": 1, "date": target_day.isoformat(), "duration_minutes": 60,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["mode"] == "dense"
    [staff] = body["staff"]
    assert staff["staff_id"] == 1
    hours = [s["start_hour"] for s in staff["slots"]]
    assert "12:00" not in hours
    assert hours[0] == "08:00"
    assert hours[-1] == "18:00"
    assert len(hours) == 10


def test_onion_slots(client, target_day):
    resp = client.get("/availability/slots", params={
        "salon_id": 1, "date": target_day.isoformat(), "duration_minutes": 60,
        "mode": "onion", "slot_size": 60, "layer": 2,
    })

    assert resp.status_code == 200
    [staff] = resp.json()["staff"]
    assert [s["start_hour"] for s in staff["slots"]] == ["08:00", "09:00", "17:00", "18:00"]


@pytest.mark.parametrize("params", [
    {"date": "not-a-date", "duration_minutes": 60},
    {"duration_minutes": 0},
])
def test_bad_input_gives_empty_list(client, target_day, params):
    query = {"salon_id": 1, "date": target_day.isoformat(), **params}

    resp = client.get("/availability/slots", params=query)

    assert resp.status_code == 200
    assert resp.json()["staff"] == []


def test_closed_day_gives_empty_list(client, target_day):
    resp = client.get("/availability/slots", params={
        "salon_id": 1, "date": (target_day + timedelta(days=1)).isoformat(), "duration_minutes": 60,
    })

    assert resp.status_code == 200
    assert resp.json()["staff"] == []


def test_invalid_onion_params(client, target_day):
    resp = client.get("/availability/slots", params={
        "salon_id": 1, "date": target_day.isoformat(), "duration_minutes": 60,
        "mode": "onion", "slot_size": 0,
    })

    assert resp.status_code == 400


def test_missing_config_conflict(client, target_day):
    resp = client.get("/availability/slots", params={
        "salon_id": 2, "date": target_day.isoformat(), "duration_minutes": 60,
    })

    assert resp.status_code == 409


def test_check_slot(client, target_day, ts):
    payload = {"salon_id": 1, "staff_id": 1, "date": target_day.isoformat()}

    free = client.post("/availability/check", json={**payload, "start": ts("10:00"), "end": ts("11:00")})
    taken = client.post("/availability/check", json={**payload, "start": ts("12:00"), "end": ts("13:00")})

    assert free.json() == {"available": True, "reason": None}
    assert taken.json() == {"available": False, "reason": "reservation_conflict"}


def test_check_slot_bad_date(client, ts):
    resp = client.post("/availability/check", json={
        "salon_id": 1, "staff_id": 1, "date": "2026-13-01", "start": ts("10:00"), "end": ts("11:00"),
    })

    assert resp.status_code == 400


def test_check_slot_inverted(client, target_day, ts):
    resp = client.post("/availability/check", json={
        "salon_id": 1, "staff_id": 1, "date": target_day.isoformat(), "start": ts("11:00"), "end": ts("10:00"),
    })

    assert resp.status_code == 400


def test_invalidate(client, target_day):
    client.get("/availability/slots", params={
        "salon_id": 1, "date": target_day.isoformat(), "duration_minutes": 60,
    })

    resp = client.post("/availability/invalidate", params={"salon_id": 1})

    assert resp.status_code == 200
    assert resp.json() == {"salon_id": 1, "deleted_keys": 1, "dates": "all"}
