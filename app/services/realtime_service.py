# app/services/realtime_service.py
# Publishes row changes to WebSocket subscribers after a commit
import logging
from typing import Optional

from app.core.websocket_manager import manager, PROFILES_CHANNEL, swap_requests_channel
from app.schemas.profile_schema import ProfileOut
from app.schemas.swap_request_schema import SwapRequestOut

logger = logging.getLogger(__name__)


def _profile_payload(profile) -> Optional[dict]:
    if profile is None:
        return None
    return ProfileOut.model_validate(profile).model_dump(mode="json")


def _swap_payload(swap_request) -> Optional[dict]:
    if swap_request is None:
        return None
    return SwapRequestOut.model_validate(swap_request).model_dump(mode="json")


async def publish_profile_change(event: str, new=None, old=None) -> None:
    await manager.publish(
        PROFILES_CHANNEL, event, "profiles",
        new=_profile_payload(new), old=_profile_payload(old),
    )


async def publish_swap_request_change(event: str, new=None, old=None) -> None:
    """Fan out to both parties' channels"""
    row = new if new is not None else old
    new_payload = _swap_payload(new)
    old_payload = _swap_payload(old)
    for profile_id in {row.requester_id, row.recipient_id}:
        await manager.publish(
            swap_requests_channel(profile_id), event, "swap_requests",
            new=new_payload, old=old_payload,
        )
    logger.info(f"swap_requests {event} {row.id} published")
