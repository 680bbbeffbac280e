"""In-process event fanout to live observers (admin dashboards and order trackers)

Observers are held in memory only. A restart drops every subscription and
clients are expected to reconnect; nothing is replayed.
"""

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Set

import structlog

logger = structlog.get_logger()

ADMIN_EVENT = "orders_updated"
ORDER_EVENT = "order"


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Event:
    """A tagged message; an event without a name is a keep-alive ping"""
    name: Optional[str]
    data: Any = None

    def encode(self) -> str:
        """Server-sent events frame"""
        if self.name is None:
            return ": ping\n\n"
        return f"event: {self.name}\ndata: {json.dumps(self.data, default=str)}\n\n"


PING = Event(None)


class Channel:
    """Delivery queue for one connected observer"""

    def __init__(self, scope: str, maxsize: int = 100):
        self.scope = scope
        self.closed = False
        self._queue: "asyncio.Queue[Event]" = asyncio.Queue(maxsize=maxsize)

    def deliver(self, event: Event) -> None:
        """Queue an event without blocking; a full or closed channel drops it"""
        if self.closed:
            return
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("Dropping event for slow observer", channel=self.scope, event=event.name)

    async def receive(self) -> Event:
        return await self._queue.get()

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        self.closed = True


class EventBus:
    """Publish/subscribe registry with an admin scope and a per-order scope.

    Only the order service publishes. Every publish iterates a copy of the
    registry, so an observer leaving mid-fanout cannot break iteration, and
    a failing channel never affects the others or the publisher.
    """

    def __init__(self, keepalive_seconds: float = 25.0, queue_size: int = 100):
        self.keepalive_seconds = keepalive_seconds
        self.queue_size = queue_size
        self._admin: Set[Channel] = set()
        self._orders: Dict[int, Set[Channel]] = {}
        self._keepalive_task: Optional[asyncio.Task] = None

    # Registration

    def subscribe_admin(self) -> Channel:
        channel = Channel("admin", self.queue_size)
        channel.deliver(Event("connected", {"ok": True, "at": now_ms()}))
        self._admin.add(channel)
        logger.info("Admin observer connected", observers=len(self._admin))
        return channel

    def unsubscribe_admin(self, channel: Channel) -> None:
        channel.close()
        if channel in self._admin:
            self._admin.discard(channel)
            logger.info("Admin observer disconnected", observers=len(self._admin))

    def subscribe_order(self, order_id: int, snapshot: Optional[Dict[str, Any]] = None) -> Channel:
        """Register interest in one order; a given snapshot is queued first"""
        channel = Channel(f"order:{order_id}", self.queue_size)
        if snapshot is not None:
            channel.deliver(Event(ORDER_EVENT, snapshot))
        self._orders.setdefault(order_id, set()).add(channel)
        logger.info("Order observer connected", order_id=order_id)
        return channel

    def unsubscribe_order(self, order_id: int, channel: Channel) -> None:
        channel.close()
        channels = self._orders.get(order_id)
        if channels is None or channel not in channels:
            return
        channels.discard(channel)
        if not channels:
            del self._orders[order_id]
        logger.info("Order observer disconnected", order_id=order_id)

    # Publication

    def publish_admin(self, payload: Dict[str, Any]) -> None:
        self._fanout(list(self._admin), Event(ADMIN_EVENT, payload))

    def publish_order(self, order_id: int, snapshot: Dict[str, Any]) -> None:
        self._fanout(list(self._orders.get(order_id, ())), Event(ORDER_EVENT, snapshot))

    def ping(self) -> None:
        self._fanout(self._all_channels(), PING)

    def _fanout(self, channels, event: Event) -> None:
        for channel in channels:
            try:
                channel.deliver(event)
            except Exception as e:
                logger.warning("Event delivery failed", channel=channel.scope, error=str(e))

    def _all_channels(self):
        channels = list(self._admin)
        for observers in list(self._orders.values()):
            channels.extend(observers)
        return channels

    # Introspection

    @property
    def admin_count(self) -> int:
        return len(self._admin)

    def order_observer_count(self, order_id: int) -> int:
        return len(self._orders.get(order_id, ()))

    def watched_orders(self) -> Set[int]:
        return set(self._orders)

    # Keep-alive

    async def _keepalive_loop(self) -> None:
        while True:
            await asyncio.sleep(self.keepalive_seconds)
            self.ping()

    def start(self) -> None:
        if self._keepalive_task is None:
            self._keepalive_task = asyncio.create_task(self._keepalive_loop())

    async def stop(self) -> None:
        """Stop pinging and forget every observer"""
        if self._keepalive_task is not None:
            self._keepalive_task.cancel()
            try:
                await self._keepalive_task
            except asyncio.CancelledError:
                pass
            self._keepalive_task = None
        for channel in self._all_channels():
            channel.close()
        self._admin.clear()
        self._orders.clear()


async def sse_frames(
    subscribe: Callable[[], Channel],
    unsubscribe: Callable[[Channel], None],
    prime: Optional[Callable[[Channel], Awaitable[None]]] = None,
) -> AsyncIterator[str]:
    """Stream a freshly subscribed channel as SSE frames until the client goes away.

    Subscription happens when streaming starts, and the transport cancels
    this generator on disconnect, so ``unsubscribe`` runs exactly once for
    every channel that was registered.

    ``prime`` runs after the channel is registered and may queue an initial
    event. Anything it reads is at least as new as the registration, and
    every later change is published to the already registered channel.
    """
    channel = subscribe()
    try:
        if prime is not None:
            await prime(channel)
        while True:
            event = await channel.receive()
            yield event.encode()
    finally:
        unsubscribe(channel)
