"""Reservation models"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Date, Time, Text

from app.database import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Customer information
    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=False)

    # Reservation details
    reservation_date = Column(Date, nullable=False, index=True)
    reservation_time = Column(Time, nullable=False)
    pax = Column(Integer, nullable=False)

    # Status
    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING.value)

    # Notes
    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ReservationSlot(Base):
    """Booked count per (date, time) slot, bumped in the same transaction as the insert"""
    __tablename__ = "reservation_slots"

    slot_date = Column(Date, primary_key=True)
    slot_time = Column(Time, primary_key=True)
    booked = Column(Integer, nullable=False, default=0)
