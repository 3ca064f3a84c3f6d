# app/core/websocket_manager.py

from fastapi import WebSocket, WebSocketDisconnect
from typing import Any, Dict, List, Optional, Tuple
import json
import logging

logger = logging.getLogger(__name__)

PROFILES_CHANNEL = "profiles"


def swap_requests_channel(profile_id: str) -> str:
    return f"swap_requests:{profile_id}"


# Channel manager: 'channel' -> List[Tuple[subscriber_id, WebSocket]]
class ConnectionManager:
    """
    Push-only change feed. Subscribers get {event, table, new, old} and
    are expected to re-fetch; nothing is queued or replayed.
    """

    def __init__(self):
        # {channel: [(subscriber_id, WebSocket)]}
        self.active_connections: Dict[str, List[Tuple[str, WebSocket]]] = {}

    async def connect(self, channel: str, subscriber_id: str, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.setdefault(channel, []).append((subscriber_id, websocket))
        logger.info(f"{subscriber_id} subscribed to {channel}. Total subscribers: {len(self.active_connections[channel])}")

    def disconnect(self, channel: str, subscriber_id: str, websocket: WebSocket):
        try:
            self.active_connections[channel].remove((subscriber_id, websocket))
            if not self.active_connections[channel]:
                del self.active_connections[channel]
            logger.info(f"{subscriber_id} left {channel}")
        except (KeyError, ValueError):
            pass # already removed

    async def publish(
        self,
        channel: str,
        event: str,
        table: str,
        new: Optional[Dict[str, Any]] = None,
        old: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Send one change event to every subscriber of channel; returns deliveries"""
        connections = list(self.active_connections.get(channel, []))
        if not connections:
            return 0

        message = json.dumps(
            {"event": event, "table": table, "new": new, "old": old},
            default=str,
        )
        delivered = 0
        for subscriber_id, connection in connections:
            try:
                await connection.send_text(message)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning(f"Dropping dead subscriber {subscriber_id} on {channel}: {e}")
                self.disconnect(channel, subscriber_id, connection)
        return delivered

# Shared manager instance
manager = ConnectionManager()
