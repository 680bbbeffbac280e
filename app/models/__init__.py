"""Database models"""

from app.models.menu import MenuItem
from app.models.order import Order, OrderItem, DailyOrderSequence, OrderStatus, OrderType
from app.models.reservation import Reservation, ReservationSlot, ReservationStatus
from app.models.user import User, UserRole

__all__ = [
    "MenuItem",
    "Order",
    "OrderItem",
    "DailyOrderSequence",
    "OrderStatus",
    "OrderType",
    "Reservation",
    "ReservationSlot",
    "ReservationStatus",
    "User",
    "UserRole",
]
