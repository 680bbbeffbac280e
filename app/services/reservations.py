"""Reservation booking with an atomic per-slot capacity cap"""

from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.errors import NotFoundError, OrderDeskError, StoreError, ValidationError
from app.models.reservation import Reservation, ReservationSlot, ReservationStatus
from app.schemas.reservation import AvailabilityResponse, ReservationCreate, SlotCount
from app.services.sequence import bump_counter, local_now

logger = structlog.get_logger()

LUNCH = (time(11, 30), time(14, 30))
DINNER = (time(17, 30), time(21, 0))
LAST_BOOKING = time(19, 0)

RESERVATION_STATUSES = [s.value for s in ReservationStatus]


def check_booking_time(reservation_date: date, reservation_time: time, now: datetime) -> None:
    """Reject bookings in the past or outside the bookable opening hours"""
    today = now.date()
    if reservation_date < today:
        raise ValidationError("Cannot book a date in the past.")

    if reservation_date == today and reservation_time < now.time():
        raise ValidationError("Time already passed for today.")

    if reservation_time > LAST_BOOKING:
        raise ValidationError("Dinner reservations must be made before 7:00 PM.")

    in_lunch = LUNCH[0] <= reservation_time <= LUNCH[1]
    in_dinner = DINNER[0] <= reservation_time <= DINNER[1]
    if not in_lunch and not in_dinner:
        raise ValidationError(
            "Reservation must be within operating hours: 11:30-14:30 or 17:30-21:00."
        )


class ReservationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: ReservationCreate) -> Reservation:
        """Book a table.

        The slot counter is bumped with a conditional upsert in the same
        transaction as the insert, so simultaneous requests cannot overbook
        a slot.
        """
        if data.pax > settings.reservation_max_pax:
            raise ValidationError(f"Party size cannot exceed {settings.reservation_max_pax}.")

        slot_time = data.reservation_time.replace(second=0, microsecond=0, tzinfo=None)
        check_booking_time(data.reservation_date, slot_time, local_now())

        try:
            booked = await bump_counter(
                self.db,
                ReservationSlot,
                {"slot_date": data.reservation_date, "slot_time": slot_time},
                "booked",
                limit=settings.reservation_max_per_slot,
            )
            if booked is None:
                raise ValidationError("This time slot is fully booked. Please choose another time.")

            reservation = Reservation(
                customer_name=data.customer_name,
                customer_phone=data.customer_phone,
                reservation_date=data.reservation_date,
                reservation_time=slot_time,
                pax=data.pax,
                notes=data.notes or None,
                status=ReservationStatus.PENDING.value,
            )
            self.db.add(reservation)
            await self.db.commit()
        except OrderDeskError as e:
            await self.db.rollback()
            logger.info(
                "Reservation rejected",
                date=str(data.reservation_date),
                time=slot_time.strftime("%H:%M"),
                reason=e.message,
            )
            raise

        logger.info(
            "Reservation created",
            reservation_id=reservation.id,
            date=str(data.reservation_date),
            time=slot_time.strftime("%H:%M"),
            pax=data.pax,
        )
        return reservation

    async def availability(self, on_date: date) -> AvailabilityResponse:
        result = await self.db.execute(
            select(Reservation.reservation_time, func.count(Reservation.id))
            .where(Reservation.reservation_date == on_date)
            .group_by(Reservation.reservation_time)
            .order_by(Reservation.reservation_time)
        )
        return AvailabilityResponse(
            max_per_slot=settings.reservation_max_per_slot,
            counts=[
                SlotCount(reservation_time=slot.strftime("%H:%M"), booked=count)
                for slot, count in result.all()
            ],
        )

    async def list_reservations(self, on_date: Optional[date] = None) -> List[Reservation]:
        query = select(Reservation)
        if on_date:
            query = query.where(Reservation.reservation_date == on_date).order_by(
                Reservation.reservation_time, Reservation.id
            )
        else:
            query = query.order_by(Reservation.created_at.desc(), Reservation.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_status(self, reservation_id: int, status: str) -> None:
        if status not in RESERVATION_STATUSES:
            raise ValidationError("Invalid status")

        try:
            result = await self.db.execute(
                update(Reservation)
                .where(Reservation.id == reservation_id)
                .values(status=status, updated_at=datetime.utcnow())
            )
            if result.rowcount == 0:
                raise NotFoundError("Reservation not found")

            await self.db.commit()
        except OrderDeskError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Reservation status update failed", reservation_id=reservation_id, error=str(e))
            raise StoreError("Failed to update reservation") from e

        logger.info("Reservation status updated", reservation_id=reservation_id, status=status)
