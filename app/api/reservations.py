"""Reservation API endpoints"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.schemas.order import MessageResponse
from app.schemas.reservation import (
    AvailabilityResponse,
    ReservationCreate,
    ReservationCreated,
    ReservationResponse,
    ReservationStatusUpdate,
)
from app.services.reservations import ReservationService
from app.api.auth import get_current_active_user

router = APIRouter()


def get_reservation_service(db: AsyncSession = Depends(get_db)) -> ReservationService:
    return ReservationService(db)


@router.post("", response_model=ReservationCreated, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
):
    """Book a table (public)"""
    reservation = await service.create(reservation_data)
    return ReservationCreated(reservation_id=reservation.id)


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    on_date: date = Query(..., alias="date"),
    service: ReservationService = Depends(get_reservation_service),
):
    """Bookings per time slot for one date"""
    return await service.availability(on_date)


@router.get("/admin", response_model=List[ReservationResponse])
async def list_reservations(
    on_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """List reservations, optionally for one date"""
    return await service.list_reservations(on_date)


@router.put("/{reservation_id}", response_model=MessageResponse)
async def update_reservation_status(
    reservation_id: int,
    update: ReservationStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Set reservation status"""
    await service.update_status(reservation_id, update.status)
    return MessageResponse(message="Reservation status updated")
