# app/services/swap_request_service.py

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timedelta, timezone
from typing import List, Optional
import logging

from app.core.config import settings
from app.models.profile import Profile, ProfileStatusEnum
from app.models.swap_request import SwapRequest, SwapStatusEnum
from app.repositories.profile_repo import ProfileRepository
from app.repositories.skill_repo import SkillRepository
from app.repositories.swap_request_repo import SwapRequestRepository
from app.schemas.profile_schema import ProfileBrief
from app.schemas.swap_request_schema import (
    DEFAULT_SWAP_MESSAGE, SwapRequestCreate, SwapRequestOut, CompletedSwapOut
)
from app.services.notification_service import NotificationService
from app.services.realtime_service import publish_swap_request_change
from app.utils.swap_lifecycle import can_transition, can_delete, party_role, may_perform, partner_of

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    # Columns are TIMESTAMP without time zone, stored as UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _display_name(profile: Optional[Profile]) -> str:
    if profile is None:
        return "Someone"
    return profile.full_name or profile.email or "Someone"


class SwapRequestService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.swap_repo = SwapRequestRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.skill_repo = SkillRepository(db)
        self.notification_service = NotificationService(db)

    async def _get_or_404(self, request_id: str) -> SwapRequest:
        swap_request = await self.swap_repo.get_swap_request_by_id(request_id)
        if not swap_request:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Swap request not found")
        return swap_request

    async def _check_skill(self, skill_id: Optional[str]) -> None:
        if skill_id and not await self.skill_repo.get_skill_by_id(skill_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Skill not found")

    async def create_swap_request(self, requester: Profile, data: SwapRequestCreate) -> SwapRequest:
        # Step 1: validate
        if data.recipient_id == requester.id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot send a swap request to yourself")

        recipient = await self.profile_repo.get_by_id(data.recipient_id)
        if not recipient or recipient.status != ProfileStatusEnum.active:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")

        await self._check_skill(data.requester_skill_id)
        await self._check_skill(data.recipient_skill_id)

        # Step 2: build the row in memory
        swap_request = SwapRequest(
            requester_id=requester.id,
            recipient_id=recipient.id,
            requester_skill_id=data.requester_skill_id,
            recipient_skill_id=data.recipient_skill_id,
            message=data.message or DEFAULT_SWAP_MESSAGE,
            status=SwapStatusEnum.pending,
            expires_at=utcnow() + timedelta(days=settings.SWAP_REQUEST_TTL_DAYS),
        )

        # Step 3: queue the recipient's notification
        self.notification_service.stage_notification(
            user_id=recipient.id,
            title=f"{_display_name(requester)} wants to swap skills with you",
            message=swap_request.message,
            link_url="/swap-requests/incoming",
        )

        # Step 4: one commit writes both
        created = await self.swap_repo.create_swap_request(swap_request)
        logger.info(f"Swap request {created.id}: {requester.id} -> {recipient.id}")

        await publish_swap_request_change("INSERT", new=created)
        return created

    async def get_incoming(self, profile: Profile) -> List[SwapRequest]:
        return await self.swap_repo.list_incoming(profile.id)

    async def get_outgoing(self, profile: Profile) -> List[SwapRequest]:
        return await self.swap_repo.list_outgoing(profile.id)

    async def get_completed(self, profile: Profile) -> List[CompletedSwapOut]:
        """
        Completed swaps with the other party and completion time filled in
        for this viewer
        """
        swaps = await self.swap_repo.list_completed(profile.id)
        completed = []
        for swap in swaps:
            partner = partner_of(swap, profile.id)
            completed.append(CompletedSwapOut(
                **SwapRequestOut.model_validate(swap).model_dump(),
                partner=ProfileBrief.model_validate(partner) if partner else None,
                completed_at=swap.updated_at,
            ))
        return completed

    async def update_status(self, request_id: str, new_status: str, profile: Profile) -> SwapRequest:
        swap_request = await self._get_or_404(request_id)

        if party_role(swap_request, profile.id) is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not part of this swap")

        if not can_transition(swap_request.status, new_status):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot move a {swap_request.status.value} request to {new_status}"
            )

        if not may_perform(swap_request, profile.id, new_status):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"You cannot mark this request {new_status}")

        if (
            new_status == SwapStatusEnum.accepted.value
            and swap_request.expires_at is not None
            and swap_request.expires_at < utcnow()
        ):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This swap request has expired")

        old = SwapRequestOut.model_validate(swap_request)

        # Step 1: change in memory
        swap_request.status = SwapStatusEnum(new_status)
        swap_request.updated_at = utcnow()

        # Step 2: side effects joined to the same commit
        if new_status == SwapStatusEnum.completed.value:
            swap_request.requester.total_swaps = (swap_request.requester.total_swaps or 0) + 1
            swap_request.recipient.total_swaps = (swap_request.recipient.total_swaps or 0) + 1

        elif new_status == SwapStatusEnum.accepted.value:
            self.notification_service.stage_notification(
                user_id=swap_request.requester_id,
                title=f"{_display_name(swap_request.recipient)} accepted your swap request",
                link_url="/swap-requests/outgoing",
            )

        elif new_status == SwapStatusEnum.rejected.value:
            self.notification_service.stage_notification(
                user_id=swap_request.requester_id,
                title=f"{_display_name(swap_request.recipient)} declined your swap request",
                link_url="/swap-requests/outgoing",
            )

        # Step 3: save everything
        updated = await self.swap_repo.update_swap_request(swap_request)
        logger.info(f"Swap request {updated.id}: {old.status.value} -> {new_status} by {profile.id}")

        await publish_swap_request_change("UPDATE", new=updated, old=old)
        return updated

    async def delete_swap_request(self, request_id: str, profile: Profile) -> None:
        swap_request = await self._get_or_404(request_id)

        if swap_request.requester_id != profile.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the requester can withdraw a request")

        if not can_delete(swap_request.status):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only pending requests can be withdrawn")

        old = SwapRequestOut.model_validate(swap_request)
        await self.swap_repo.delete_swap_request(swap_request)
        logger.info(f"Swap request {old.id} withdrawn")

        await publish_swap_request_change("DELETE", old=old)
        return
