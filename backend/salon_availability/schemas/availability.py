"""
Pydantic schemas for availability API.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class SlotRead(BaseModel):
    """One bookable slot."""
    start: int = Field(description="Unix seconds")
    end: int = Field(description="Unix seconds")
    start_hour: str  # "HH:MM" salon local time
    end_hour: str
    has_overlap: bool = False

    model_config = {"from_attributes": True}


class StaffSlotsRead(BaseModel):
    staff_id: int
    slots: list[SlotRead]

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    """Slots per staff for a salon day. Empty staff list = nothing bookable."""
    salon_id: int
    date: str
    duration_minutes: int
    mode: Literal["dense", "onion"]
    staff: list[StaffSlotsRead]

    model_config = {"from_attributes": True}


class SlotCheckRequest(BaseModel):
    """Write-time check for one candidate slot."""
    salon_id: int
    staff_id: int
    date: str  # "YYYY-MM-DD"
    start: int
    end: int
    allow_overlap: int | None = Field(None, ge=0, description="Minutes past closing allowed; default is the engine onion setting")
    exclude_reservation_id: Optional[int] = None

    model_config = {"from_attributes": True}


class SlotCheckResponse(BaseModel):
    available: bool
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class CacheInvalidateResponse(BaseModel):
    salon_id: int
    deleted_keys: int
    dates: list[str] | str
