# backend/salon_availability/routers/availability.py
"""
Availability API endpoints.

GET  /availability/slots      - Bookable slots for a salon day (read path)
POST /availability/check      - Write-time gate for one slot
POST /availability/invalidate - Drop cached salon windows (admin endpoint)
"""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.availability import (
    AvailabilityResponse,
    CacheInvalidateResponse,
    SlotCheckRequest,
    SlotCheckResponse,
    SlotRead,
    StaffSlotsRead,
)
from ..services.availability import (
    InvalidDateError,
    InvalidSlotError,
    OnionParams,
    ScheduleConfigMissingError,
    check_slot_available,
    find_available_slots,
    get_engine_config,
    invalidate_salon_cache,
)
from ..services.availability.config import format_ts


router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("/slots", response_model=AvailabilityResponse)
def get_available_slots(
    salon_id: int,
    target_date: str = Query(..., alias="date"),
    duration_minutes: int = Query(...),
    staff_id: int | None = None,
    mode: Literal["dense", "onion"] = "dense",
    slot_size: int | None = None,
    layer: int | None = None,
    disable_back_slots: bool = False,
    allow_overlap: int | None = None,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """Get bookable slots. Closed day, bad date or duration → empty staff list."""
    config = get_engine_config()
    defaults = config.onion

    try:
        onion = OnionParams(
            slot_size=slot_size if slot_size is not None else defaults.slot_size,
            layer=layer if layer is not None else defaults.layer,
            disable_back_slots=disable_back_slots,
            allow_overlap=allow_overlap if allow_overlap is not None else defaults.allow_overlap,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        results = find_available_slots(
            db=db,
            salon_id=salon_id,
            date_str=target_date,
            duration_minutes=duration_minutes,
            staff_id=staff_id,
            mode=mode,
            onion=onion,
            config=config,
            redis=redis,
        )
    except ScheduleConfigMissingError as e:
        raise HTTPException(status_code=409, detail=str(e))

    tz = config.tz
    return AvailabilityResponse(
        salon_id=salon_id,
        date=target_date,
        duration_minutes=duration_minutes,
        mode=mode,
        staff=[
            StaffSlotsRead(
                staff_id=item.staff_id,
                slots=[
                    SlotRead(
                        start=slot.start,
                        end=slot.end,
                        start_hour=format_ts(slot.start, tz),
                        end_hour=format_ts(slot.end, tz),
                        has_overlap=slot.has_overlap,
                    )
                    for slot in item.slots
                ],
            )
            for item in results
        ],
    )


@router.post("/check", response_model=SlotCheckResponse)
def check_slot(
    data: SlotCheckRequest,
    db: Session = Depends(get_db),
):
    """Re-check one slot right before the reservation is written."""
    try:
        result = check_slot_available(
            db=db,
            salon_id=data.salon_id,
            staff_id=data.staff_id,
            date_str=data.date,
            start=data.start,
            end=data.end,
            allow_overlap=data.allow_overlap,
            exclude_reservation_id=data.exclude_reservation_id,
            config=get_engine_config(),
        )
    except (InvalidDateError, InvalidSlotError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScheduleConfigMissingError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SlotCheckResponse(available=result.available, reason=result.reason)


@router.post("/invalidate", response_model=CacheInvalidateResponse)
def invalidate_availability_cache(
    salon_id: int,
    dates: list[date] | None = Query(None),
    redis: Redis = Depends(get_redis),
):
    """Manually invalidate cached salon windows (admin endpoint)."""
    deleted = invalidate_salon_cache(redis, salon_id, dates)

    return CacheInvalidateResponse(
        salon_id=salon_id,
        deleted_keys=deleted,
        dates=[d.isoformat() for d in dates] if dates else "all",
    )
