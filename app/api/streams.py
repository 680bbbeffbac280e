"""Live order updates as server-sent event streams

Stream handlers never take a request-scoped session: each database read runs
in its own short session that is closed before or between frames.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import async_sessionmaker
import structlog

from app.database import get_session_factory
from app.services.events import ORDER_EVENT, Channel, Event, EventBus, sse_frames
from app.services.orders import OrderService
from app.api.auth import authenticate_token
from app.api.orders import get_event_bus

router = APIRouter()
logger = structlog.get_logger()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # nginx: disable buffering
}


def _event_stream(frames) -> StreamingResponse:
    return StreamingResponse(frames, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/stream")
async def admin_stream(
    token: str = Query(""),
    sessions: async_sessionmaker = Depends(get_session_factory),
    bus: EventBus = Depends(get_event_bus),
):
    """Every order lifecycle event; EventSource cannot send headers, so the JWT comes in the query"""
    async with sessions() as db:
        user = await authenticate_token(token, db)
        username = user.username
    logger.info("Admin stream opened", username=username)

    return _event_stream(sse_frames(bus.subscribe_admin, bus.unsubscribe_admin))


@router.get("/{order_id}/stream")
async def order_stream(
    order_id: int,
    sessions: async_sessionmaker = Depends(get_session_factory),
    bus: EventBus = Depends(get_event_bus),
):
    """Snapshots of one order: the current state first, then one per change"""
    async with sessions() as db:
        await OrderService(db, bus).get_order(order_id)  # 404 before the stream opens

    async def send_snapshot(channel: Channel) -> None:
        # Read after registration, so no committed change can fall in between.
        # A snapshot pushed meanwhile was read after a later commit; it stands.
        async with sessions() as db:
            snapshot = await OrderService(db, bus).get_snapshot(order_id)
        if not channel.pending():
            channel.deliver(Event(ORDER_EVENT, snapshot))

    return _event_stream(sse_frames(
        lambda: bus.subscribe_order(order_id),
        lambda channel: bus.unsubscribe_order(order_id, channel),
        prime=send_snapshot,
    ))
