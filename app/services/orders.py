"""Order lifecycle: transactional creation, status changes and live notifications"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.errors import (
    InvalidStateError,
    NotFoundError,
    OrderDeskError,
    StoreError,
    ValidationError,
    VerificationError,
)
from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.order import OrderCreate, OrderCreated, OrderResponse
from app.services.catalog import get_price_if_available
from app.services.events import EventBus, now_ms
from app.services.sequence import format_order_no, local_now, next_sequence

logger = structlog.get_logger()

ADMIN_STATUSES = [s.value for s in OrderStatus]


def snapshot_of(order: Order) -> Dict[str, Any]:
    """JSON-ready order + items, the payload pushed to order observers"""
    return OrderResponse.model_validate(order).model_dump(mode="json")


class OrderService:
    """All order mutations go through here.

    Each mutation commits first and only then notifies the event bus, so an
    observer never hears about a state that a fresh read would not return.
    """

    def __init__(self, db: AsyncSession, bus: EventBus):
        self.db = db
        self.bus = bus

    # Reads

    async def _load(self, order_id: int) -> Order:
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items).selectinload(OrderItem.menu_item))
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError("Order not found")
        return order

    async def get_order(self, order_id: int) -> Order:
        return await self._load(order_id)

    async def get_snapshot(self, order_id: int) -> Dict[str, Any]:
        return snapshot_of(await self._load(order_id))

    async def track(self, order_no: str) -> Order:
        result = await self.db.execute(
            select(Order)
            .where(Order.order_no == order_no)
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError("Order not found")
        return order

    async def list_orders(self) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.menu_item))
            .order_by(Order.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    # Mutations

    async def create_order(self, data: Union[OrderCreate, Dict[str, Any]]) -> OrderCreated:
        """Number, price and persist an order with its items in one transaction"""
        if not isinstance(data, OrderCreate):
            try:
                data = OrderCreate.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError("Invalid order", errors=e.errors(include_url=False)) from e

        now = local_now()
        try:
            seq = await next_sequence(self.db, now.date())
            order_no = format_order_no(now, seq)

            order = Order(
                order_no=order_no,
                customer_name=data.customer_name,
                customer_phone=data.customer_phone,
                order_type=data.order_type.value,
                table_no=data.table_no or None,
                notes=data.notes or None,
                status=OrderStatus.PENDING.value,
                total_amount=Decimal("0"),
                items=[],
            )
            self.db.add(order)
            await self.db.flush()

            total = Decimal("0")
            for line in data.items:
                unit_price = await get_price_if_available(self.db, line.menu_item_id)
                if unit_price is None:
                    raise NotFoundError("Menu item not found")

                line_total = unit_price * line.quantity
                total += line_total
                order.items.append(
                    OrderItem(
                        menu_item_id=line.menu_item_id,
                        quantity=line.quantity,
                        unit_price=unit_price,
                        line_total=line_total,
                    )
                )

            order.total_amount = total
            order_id = order.id
            await self.db.commit()
        except OrderDeskError as e:
            await self.db.rollback()
            logger.warning("Order creation rolled back", reason=e.message)
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Order creation failed", error=str(e))
            raise StoreError("Failed to create order") from e

        logger.info("Order created", order_id=order_id, order_no=order_no, total_amount=str(total))

        self.bus.publish_admin({
            "action": "created",
            "order_id": order_id,
            "order_no": order_no,
            "at": now_ms(),
        })
        await self._push_snapshot(order_id)

        return OrderCreated(order_id=order_id, order_no=order_no, total_amount=float(total))

    async def mark_collected(self, order_id: int, order_no: str, customer_phone: str) -> Dict[str, Any]:
        """Customer confirms pickup; only allowed from 'ready' with matching order_no and phone"""
        try:
            result = await self.db.execute(
                select(Order)
                .where(Order.id == order_id)
                .execution_options(populate_existing=True)
            )
            order = result.scalar_one_or_none()
            if not order:
                raise NotFoundError("Order not found")

            if (order.order_no or "") != (order_no or "") or (order.customer_phone or "") != (customer_phone or ""):
                raise VerificationError("Verification failed")

            current = order.status
            if (current or "").lower() != OrderStatus.READY.value:
                raise InvalidStateError(
                    f"Cannot mark collected unless status is 'ready'. Current: '{current}'"
                )

            # Guarded update: a concurrent change away from 'ready' wins
            upd = await self.db.execute(
                update(Order)
                .where(Order.id == order_id, func.lower(Order.status) == OrderStatus.READY.value)
                .values(status=OrderStatus.COLLECTED.value, updated_at=datetime.utcnow())
            )
            if upd.rowcount == 0:
                raise InvalidStateError("Cannot mark collected unless status is 'ready'")

            await self.db.commit()
        except OrderDeskError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Mark collected failed", order_id=order_id, error=str(e))
            raise StoreError("Failed to update order") from e

        logger.info("Order collected", order_id=order_id)

        self.bus.publish_admin({
            "action": "collected",
            "order_id": order_id,
            "at": now_ms(),
        })
        snapshot = await self.get_snapshot(order_id)
        self.bus.publish_order(order_id, snapshot)
        return snapshot

    async def update_status(self, order_id: int, status: str) -> None:
        """Admin override: any of pending/ready/collected from any current status"""
        if status not in ADMIN_STATUSES:
            raise ValidationError("Invalid status")

        try:
            result = await self.db.execute(
                update(Order)
                .where(Order.id == order_id)
                .values(status=status, updated_at=datetime.utcnow())
            )
            if result.rowcount == 0:
                raise NotFoundError("Order not found")

            await self.db.commit()
        except OrderDeskError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Status update failed", order_id=order_id, error=str(e))
            raise StoreError("Failed to update order") from e

        logger.info("Order status updated", order_id=order_id, status=status)

        self.bus.publish_admin({
            "action": "status_updated",
            "order_id": order_id,
            "status": status,
            "at": now_ms(),
        })
        await self._push_snapshot(order_id)

    async def _push_snapshot(self, order_id: int) -> None:
        if not self.bus.order_observer_count(order_id):
            return
        try:
            snapshot = await self.get_snapshot(order_id)
        except (SQLAlchemyError, NotFoundError) as e:
            logger.warning("Snapshot push skipped", order_id=order_id, error=str(e))
            return
        self.bus.publish_order(order_id, snapshot)
