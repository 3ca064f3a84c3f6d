# app/repositories/swap_request_repo.py

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from typing import Dict, List, Optional

from app.models.profile import Profile
from app.models.skill import UserSkillOffered
from app.models.swap_request import SwapRequest, SwapStatusEnum


class SwapRequestRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_parties(self, stmt):
        # Both parties with their offered skills (shown on request cards)
        return stmt.options(
            selectinload(SwapRequest.requester)
            .selectinload(Profile.skills_offered)
            .selectinload(UserSkillOffered.skill),
            selectinload(SwapRequest.recipient)
            .selectinload(Profile.skills_offered)
            .selectinload(UserSkillOffered.skill),
        ).execution_options(populate_existing=True)

    async def get_swap_request_by_id(self, request_id: str) -> Optional[SwapRequest]:
        stmt = self._with_parties(select(SwapRequest).where(SwapRequest.id == request_id))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_incoming(self, profile_id: str) -> List[SwapRequest]:
        """Requests addressed to profile_id, newest first"""
        stmt = self._with_parties(
            select(SwapRequest)
            .where(SwapRequest.recipient_id == profile_id)
            .order_by(SwapRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_outgoing(self, profile_id: str) -> List[SwapRequest]:
        """Requests sent by profile_id, newest first"""
        stmt = self._with_parties(
            select(SwapRequest)
            .where(SwapRequest.requester_id == profile_id)
            .order_by(SwapRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_completed(self, profile_id: str) -> List[SwapRequest]:
        """Completed swaps where profile_id is either party, latest first"""
        stmt = self._with_parties(
            select(SwapRequest)
            .where(
                SwapRequest.status == SwapStatusEnum.completed,
                or_(SwapRequest.requester_id == profile_id, SwapRequest.recipient_id == profile_id),
            )
            .order_by(SwapRequest.updated_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_all(self) -> List[SwapRequest]:
        stmt = self._with_parties(select(SwapRequest).order_by(SwapRequest.created_at.desc()))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_by_status(self) -> Dict[str, int]:
        stmt = select(SwapRequest.status, func.count(SwapRequest.id)).group_by(SwapRequest.status)
        result = await self.db.execute(stmt)
        return {getattr(status, "value", status): count for status, count in result.all()}

    async def create_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        self.db.add(swap_request)
        await self.db.commit()
        return await self.get_swap_request_by_id(swap_request.id)

    async def update_swap_request(self, swap_request: SwapRequest) -> SwapRequest:
        """
        Commit pending changes (status, and anything staged alongside it)
        """
        await self.db.commit()
        await self.db.refresh(swap_request)
        return await self.get_swap_request_by_id(swap_request.id)

    async def delete_swap_request(self, swap_request: SwapRequest) -> None:
        await self.db.delete(swap_request)
        await self.db.commit()
        return
