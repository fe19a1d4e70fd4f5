"""
Booking I/O models for the scheduling proxy.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AvailableTime(BaseModel):
    """One bookable slot as reported by the scheduling provider."""

    model_config = ConfigDict(extra="ignore")

    status: str
    start_time: datetime
    invitees_remaining: Optional[int] = None
    scheduling_url: Optional[str] = None


class AvailableTimesResponse(BaseModel):
    available_times: List[AvailableTime]


class BookingCreate(BaseModel):
    post_id: Optional[str] = None
    event_type_uri: str = Field(min_length=1)
    start_time: datetime
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    company: Optional[str] = None
    message: Optional[str] = None
    timezone: Optional[str] = None


class BookingResponse(BaseModel):
    scheduling_url: str
