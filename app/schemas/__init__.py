"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    TokenPayload,
    RefreshRequest,
    UserResponse,
)
from app.schemas.menu import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemPublic,
    MenuItemResponse,
)
from app.schemas.order import (
    OrderCreate,
    OrderCreated,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderTrackResponse,
    CollectedVerify,
    MessageResponse,
)
from app.schemas.reservation import (
    ReservationCreate,
    ReservationCreated,
    ReservationStatusUpdate,
    ReservationResponse,
    AvailabilityResponse,
    SlotCount,
)
from app.schemas.payment import (
    ChargeRequest,
    ChargeResponse,
    Payment,
)

__all__ = [
    "Token",
    "TokenPayload",
    "RefreshRequest",
    "UserResponse",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemPublic",
    "MenuItemResponse",
    "OrderCreate",
    "OrderCreated",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderStatusUpdate",
    "OrderTrackResponse",
    "CollectedVerify",
    "MessageResponse",
    "ReservationCreate",
    "ReservationCreated",
    "ReservationStatusUpdate",
    "ReservationResponse",
    "AvailabilityResponse",
    "SlotCount",
    "ChargeRequest",
    "ChargeResponse",
    "Payment",
]
