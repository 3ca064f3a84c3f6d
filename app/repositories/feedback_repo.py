# app/repositories/feedback_repo.py

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from typing import List, Optional
import logging

from app.models.feedback import Feedback
from app.models.profile import Profile
from app.models.skill import UserSkillOffered

logger = logging.getLogger(__name__)


class FeedbackRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_people(self, stmt):
        return stmt.options(
            selectinload(Feedback.reviewer)
            .selectinload(Profile.skills_offered)
            .selectinload(UserSkillOffered.skill),
            selectinload(Feedback.reviewee),
        ).execution_options(populate_existing=True)

    async def get_feedback_by_id(self, feedback_id: str) -> Optional[Feedback]:
        stmt = self._with_people(select(Feedback).where(Feedback.id == feedback_id))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_existing(self, swap_session_id: str, reviewer_id: str) -> Optional[Feedback]:
        """
        Has this reviewer already reviewed this swap?
        """
        stmt = select(Feedback).where(
            Feedback.swap_session_id == swap_session_id,
            Feedback.reviewer_id == reviewer_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_received(self, reviewee_id: str, public_only: bool = False) -> List[Feedback]:
        stmt = select(Feedback).where(Feedback.reviewee_id == reviewee_id)
        if public_only:
            stmt = stmt.where(Feedback.is_public == True)
        stmt = self._with_people(stmt.order_by(Feedback.created_at.desc()))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_ratings_for(self, reviewee_id: str) -> List[int]:
        stmt = select(Feedback.rating).where(Feedback.reviewee_id == reviewee_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> List[Feedback]:
        stmt = self._with_people(select(Feedback).order_by(Feedback.created_at.desc()))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_feedback(self) -> int:
        result = await self.db.execute(select(func.count(Feedback.id)))
        return result.scalar_one()

    async def create_feedback(self, feedback: Feedback) -> Feedback:
        """
        Insert and commit. The unique (swap, reviewer) constraint backs
        up the service-level duplicate check.
        """
        try:
            self.db.add(feedback)
            await self.db.flush()
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error(f"Creating feedback failed: {e}", exc_info=True)
            raise
        return await self.get_feedback_by_id(feedback.id)
