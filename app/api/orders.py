"""Order API endpoints"""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.schemas.order import (
    CollectedVerify,
    MessageResponse,
    OrderCreate,
    OrderCreated,
    OrderResponse,
    OrderStatusUpdate,
    OrderTrackResponse,
)
from app.services.events import EventBus
from app.services.orders import OrderService
from app.api.auth import get_current_active_user

router = APIRouter()


def get_event_bus(request: Request) -> EventBus:
    """The process-wide bus created in the application lifespan"""
    return request.app.state.event_bus


def get_order_service(
    db: AsyncSession = Depends(get_db),
    bus: EventBus = Depends(get_event_bus),
) -> OrderService:
    return OrderService(db, bus)


@router.post("", response_model=OrderCreated, status_code=201)
async def create_order(
    order_data: OrderCreate,
    service: OrderService = Depends(get_order_service),
):
    """Place a new order (public)"""
    return await service.create_order(order_data)


@router.get("/track/{order_no}", response_model=OrderTrackResponse)
async def track_order(
    order_no: str,
    service: OrderService = Depends(get_order_service),
):
    """Order status by order number (public)"""
    return await service.track(order_no)


@router.get("/admin", response_model=List[OrderResponse])
async def list_orders(
    current_user: User = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """All orders with their items, newest first"""
    return await service.list_orders()


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
):
    """Get order details"""
    return await service.get_order(order_id)


@router.post("/{order_id}/collected", response_model=OrderResponse)
async def mark_collected(
    order_id: int,
    verify: CollectedVerify,
    service: OrderService = Depends(get_order_service),
):
    """Customer confirms the order was picked up"""
    return await service.mark_collected(order_id, verify.order_no, verify.customer_phone)


@router.put("/{order_id}", response_model=MessageResponse)
async def update_order_status(
    order_id: int,
    update: OrderStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service),
):
    """Set order status (pending, ready or collected)"""
    await service.update_status(order_id, update.status)
    return MessageResponse(message="Order status updated")
