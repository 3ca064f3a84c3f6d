# app/routers/realtime_router.py

from fastapi import APIRouter, Depends, status, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db
from app.core.security import get_identity_from_websocket_token
from app.core.websocket_manager import manager, PROFILES_CHANNEL, swap_requests_channel
from app.repositories.profile_repo import ProfileRepository
from app.schemas.identity_schema import IdentityUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["Realtime"])


async def _listen(websocket: WebSocket, channel: str, subscriber_id: str):
    await manager.connect(channel, subscriber_id, websocket)
    try:
        while True:
            # Push-only: client messages (pings) are read and ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(channel, subscriber_id, websocket)
    except RuntimeError as e:
        logger.error(f"Unexpected error on {channel} for {subscriber_id}: {e}")
        manager.disconnect(channel, subscriber_id, websocket)


@router.websocket("/swap-requests")
async def swap_requests_feed(
    websocket: WebSocket,
    # Connect with /realtime/swap-requests?token=<session token>
    identity: IdentityUser = Depends(get_identity_from_websocket_token),
    db: AsyncSession = Depends(get_db)
):
    """
    Changes to swap requests where the caller is either party
    """
    profile = await ProfileRepository(db).get_by_clerk_id(identity.id)
    # Give the pooled connection back; the feed may stay open for hours
    await db.close()
    if profile is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Profile not found")
        return

    await _listen(websocket, swap_requests_channel(profile.id), profile.id)


@router.websocket("/profiles")
async def profiles_feed(
    websocket: WebSocket,
    identity: IdentityUser = Depends(get_identity_from_websocket_token)
):
    """
    Changes to any profile
    """
    await _listen(websocket, PROFILES_CHANNEL, identity.id)
