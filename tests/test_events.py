"""Tests for the in-process event bus and SSE framing"""

import asyncio
import json

import pytest

from app.services.events import (
    ADMIN_EVENT,
    ORDER_EVENT,
    PING,
    Event,
    EventBus,
    sse_frames,
)


async def drain(channel):
    """Everything already queued on a channel"""
    events = []
    while channel.pending():
        events.append(await channel.receive())
    return events


def parse_frame(frame: str):
    lines = frame.rstrip("\n").split("\n")
    assert lines[0].startswith("event: ")
    assert lines[1].startswith("data: ")
    return lines[0][len("event: "):], json.loads(lines[1][len("data: "):])


def test_event_encoding():
    frame = Event(ADMIN_EVENT, {"action": "created", "order_id": 7}).encode()

    assert frame.endswith("\n\n")
    name, data = parse_frame(frame)
    assert name == "orders_updated"
    assert data == {"action": "created", "order_id": 7}


def test_ping_is_a_comment_frame():
    assert PING.encode() == ": ping\n\n"


@pytest.mark.asyncio
async def test_admin_subscriber_gets_connected_first():
    bus = EventBus()
    channel = bus.subscribe_admin()

    first = await channel.receive()
    assert first.name == "connected"
    assert first.data["ok"] is True
    assert isinstance(first.data["at"], int)
    assert bus.admin_count == 1


@pytest.mark.asyncio
async def test_admin_publish_reaches_every_admin():
    bus = EventBus()
    channels = [bus.subscribe_admin() for _ in range(3)]

    bus.publish_admin({"action": "status_updated", "order_id": 1, "status": "ready"})

    for channel in channels:
        events = await drain(channel)
        assert [e.name for e in events] == ["connected", ADMIN_EVENT]
        assert events[1].data["status"] == "ready"


@pytest.mark.asyncio
async def test_order_observer_gets_snapshot_first_and_only_its_order():
    bus = EventBus()
    mine = bus.subscribe_order(1, {"id": 1, "status": "pending"})
    other = bus.subscribe_order(2, {"id": 2, "status": "pending"})
    admin = bus.subscribe_admin()

    bus.publish_order(1, {"id": 1, "status": "ready"})

    assert [e.data["status"] for e in await drain(mine)] == ["pending", "ready"]
    assert [e.data["id"] for e in await drain(other)] == [2]
    assert [e.name for e in await drain(admin)] == ["connected"]


@pytest.mark.asyncio
async def test_unsubscribe_is_idempotent():
    bus = EventBus()
    admin = bus.subscribe_admin()
    order = bus.subscribe_order(5, {"id": 5})

    bus.unsubscribe_admin(admin)
    bus.unsubscribe_admin(admin)
    bus.unsubscribe_order(5, order)
    bus.unsubscribe_order(5, order)

    assert bus.admin_count == 0
    assert bus.order_observer_count(5) == 0


@pytest.mark.asyncio
async def test_last_order_observer_removes_the_entry():
    bus = EventBus()
    first = bus.subscribe_order(5, {"id": 5})
    second = bus.subscribe_order(5, {"id": 5})

    bus.unsubscribe_order(5, first)
    assert bus.watched_orders() == {5}

    bus.unsubscribe_order(5, second)
    assert bus.watched_orders() == set()


@pytest.mark.asyncio
async def test_unsubscribed_channel_gets_nothing_more():
    bus = EventBus()
    channel = bus.subscribe_order(5, {"id": 5})
    await drain(channel)

    bus.unsubscribe_order(5, channel)
    bus.publish_order(5, {"id": 5, "status": "ready"})

    assert channel.pending() == 0


@pytest.mark.asyncio
async def test_failing_observer_does_not_affect_others(monkeypatch):
    bus = EventBus()
    broken = bus.subscribe_admin()
    healthy = bus.subscribe_admin()

    def explode(event):
        raise ConnectionResetError("client went away")

    monkeypatch.setattr(broken, "deliver", explode)

    bus.publish_admin({"action": "created", "order_id": 1})

    assert [e.name for e in await drain(healthy)] == ["connected", ADMIN_EVENT]
    assert bus.admin_count == 2


@pytest.mark.asyncio
async def test_slow_observer_drops_instead_of_blocking():
    bus = EventBus(queue_size=1)
    slow = bus.subscribe_admin()  # queue already holds "connected"
    fast = bus.subscribe_admin()
    await fast.receive()

    bus.publish_admin({"action": "created", "order_id": 1})

    assert [e.name for e in await drain(slow)] == ["connected"]
    assert [e.name for e in await drain(fast)] == [ADMIN_EVENT]


@pytest.mark.asyncio
async def test_ping_reaches_every_observer():
    bus = EventBus()
    admin = bus.subscribe_admin()
    order = bus.subscribe_order(3, {"id": 3})

    bus.ping()

    assert (await drain(admin))[-1] is PING
    assert (await drain(order))[-1] is PING


@pytest.mark.asyncio
async def test_keepalive_loop_pings_until_stopped():
    bus = EventBus(keepalive_seconds=0.01)
    channel = bus.subscribe_admin()
    bus.start()

    await asyncio.sleep(0.05)
    await bus.stop()

    events = await drain(channel)
    assert events[0].name == "connected"
    assert PING in events[1:]
    assert bus.admin_count == 0
    assert channel.closed


@pytest.mark.asyncio
async def test_sse_frames_subscribes_and_cleans_up():
    bus = EventBus()
    frames = sse_frames(bus.subscribe_admin, bus.unsubscribe_admin)

    first = await frames.__anext__()
    name, data = parse_frame(first)
    assert name == "connected"
    assert bus.admin_count == 1

    bus.publish_admin({"action": "created", "order_id": 9, "order_no": "20260105-009"})
    name, data = parse_frame(await frames.__anext__())
    assert name == ADMIN_EVENT
    assert data["order_no"] == "20260105-009"

    await frames.aclose()
    assert bus.admin_count == 0


@pytest.mark.asyncio
async def test_sse_frames_for_one_order():
    bus = EventBus()
    frames = sse_frames(
        lambda: bus.subscribe_order(4, {"id": 4, "status": "pending"}),
        lambda channel: bus.unsubscribe_order(4, channel),
    )

    name, data = parse_frame(await frames.__anext__())
    assert name == ORDER_EVENT
    assert data["status"] == "pending"
    assert bus.order_observer_count(4) == 1

    await frames.aclose()
    assert bus.watched_orders() == set()


@pytest.mark.asyncio
async def test_sse_frames_primes_after_registration():
    bus = EventBus()
    seen = []

    async def prime(channel):
        seen.append(bus.order_observer_count(4))
        channel.deliver(Event(ORDER_EVENT, {"id": 4, "status": "ready"}))

    frames = sse_frames(
        lambda: bus.subscribe_order(4),
        lambda channel: bus.unsubscribe_order(4, channel),
        prime=prime,
    )

    name, data = parse_frame(await frames.__anext__())
    assert seen == [1]
    assert data["status"] == "ready"

    await frames.aclose()
    assert bus.watched_orders() == set()


@pytest.mark.asyncio
async def test_failed_prime_still_unsubscribes():
    bus = EventBus()

    async def prime(channel):
        raise RuntimeError("snapshot unavailable")

    frames = sse_frames(
        lambda: bus.subscribe_order(4),
        lambda channel: bus.unsubscribe_order(4, channel),
        prime=prime,
    )

    with pytest.raises(RuntimeError):
        await frames.__anext__()

    assert bus.watched_orders() == set()


@pytest.mark.asyncio
async def test_subscribe_order_without_snapshot_queues_nothing():
    bus = EventBus()

    channel = bus.subscribe_order(6)

    assert channel.pending() == 0
    assert bus.order_observer_count(6) == 1
