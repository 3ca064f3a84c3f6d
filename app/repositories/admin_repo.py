# app/repositories/admin_repo.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List

from app.models.admin_action import AdminAction


class AdminActionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def stage_action(self, action: AdminAction) -> AdminAction:
        """
        Add the audit row to the session without committing.
        It is written by the same commit as the mutation it describes.
        """
        self.db.add(action)
        return action

    async def create_action(self, action: AdminAction) -> AdminAction:
        """Audit row with no accompanying mutation (e.g. report download)"""
        self.db.add(action)
        await self.db.commit()
        await self.db.refresh(action)
        return action

    async def list_recent_actions(self, limit: int = 50) -> List[AdminAction]:
        stmt = (
            select(AdminAction)
            .order_by(AdminAction.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()
