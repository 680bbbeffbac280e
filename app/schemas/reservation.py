"""Reservation schemas"""

from datetime import date, datetime, time
from typing import Optional, List
from pydantic import BaseModel, Field, field_serializer


class ReservationCreate(BaseModel):
    """Create reservation request"""
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=3)
    reservation_date: date  # YYYY-MM-DD
    reservation_time: time  # HH:MM
    pax: int = Field(ge=1)
    notes: Optional[str] = None


class ReservationCreated(BaseModel):
    reservation_id: int


class ReservationStatusUpdate(BaseModel):
    """Admin status update request"""
    status: str


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: int
    customer_name: str
    customer_phone: str
    reservation_date: date
    reservation_time: time
    pax: int
    notes: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("reservation_time")
    def _format_time(self, value: time) -> str:
        return value.strftime("%H:%M")

    class Config:
        from_attributes = True


class SlotCount(BaseModel):
    """Bookings in one time slot"""
    reservation_time: str
    booked: int


class AvailabilityResponse(BaseModel):
    """Availability for one date"""
    max_per_slot: int
    counts: List[SlotCount] = []
