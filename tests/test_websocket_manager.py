import json

import pytest
from fastapi import WebSocketDisconnect

from app.core.websocket_manager import ConnectionManager, swap_requests_channel


class FakeWebSocket:
    def __init__(self, broken=False):
        self.accepted = False
        self.sent = []
        self.broken = broken

    async def accept(self):
        self.accepted = True

    async def send_text(self, message):
        if self.broken:
            raise WebSocketDisconnect(code=1006)
        self.sent.append(json.loads(message))


@pytest.mark.asyncio
async def test_publish_reaches_channel_subscribers_only():
    manager = ConnectionManager()
    mine, theirs = FakeWebSocket(), FakeWebSocket()
    await manager.connect(swap_requests_channel("p1"), "p1", mine)
    await manager.connect(swap_requests_channel("p2"), "p2", theirs)

    delivered = await manager.publish(swap_requests_channel("p1"), "INSERT", "swap_requests", new={"id": "s1"})

    assert delivered == 1
    assert mine.accepted
    assert mine.sent == [{"event": "INSERT", "table": "swap_requests", "new": {"id": "s1"}, "old": None}]
    assert theirs.sent == []


@pytest.mark.asyncio
async def test_dead_subscribers_are_dropped():
    manager = ConnectionManager()
    alive, dead = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect("profiles", "a", alive)
    await manager.connect("profiles", "b", dead)

    assert await manager.publish("profiles", "UPDATE", "profiles", new={"id": "a"}) == 1
    assert manager.active_connections["profiles"] == [("a", alive)]


@pytest.mark.asyncio
async def test_publish_without_subscribers():
    manager = ConnectionManager()
    assert await manager.publish("profiles", "DELETE", "profiles", old={"id": "x"}) == 0


@pytest.mark.asyncio
async def test_disconnect_cleans_up_empty_channels():
    manager = ConnectionManager()
    ws = FakeWebSocket()
    await manager.connect("profiles", "a", ws)
    manager.disconnect("profiles", "a", ws)
    assert "profiles" not in manager.active_connections
    # twice is fine
    manager.disconnect("profiles", "a", ws)
