# app/repositories/profile_repo.py
from sqlalchemy import delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from app.models.profile import Profile, ProfileStatusEnum
from app.models.skill import UserSkillOffered, UserSkillWanted
from app.models.swap_request import SwapRequest
from app.models.feedback import Feedback
from app.models.notification import Notification
from app.schemas.profile_schema import ProfileUpdate
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_skills(self, stmt):
        # Always load both skill directions (and each link's skill);
        # populate_existing so re-reads after a commit see new links
        return stmt.options(
            selectinload(Profile.skills_offered).selectinload(UserSkillOffered.skill),
            selectinload(Profile.skills_wanted).selectinload(UserSkillWanted.skill),
        ).execution_options(populate_existing=True)

    async def get_by_clerk_id(self, clerk_id: str) -> Profile | None:
        stmt = self._with_skills(select(Profile).where(Profile.clerk_id == clerk_id))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_by_id(self, profile_id: str) -> Profile | None:
        stmt = self._with_skills(select(Profile).where(Profile.id == profile_id))
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def _commit(self):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Profile write failed: {e}", exc_info=True)
            raise

    async def create_profile(self, profile: Profile) -> Profile:
        self.db.add(profile)
        await self._commit()
        return await self.get_by_id(profile.id)

    async def save_profile(self, profile: Profile) -> Profile:
        """Commit pending changes on profile and re-read it"""
        await self._commit()
        await self.db.refresh(profile)
        return await self.get_by_id(profile.id)

    async def update_profile(self, profile: Profile, update_data: ProfileUpdate) -> Profile:
        # exclude_unset: only fields the client actually sent
        update_dict = update_data.model_dump(exclude_unset=True)

        for key, value in update_dict.items():
            setattr(profile, key, value)

        return await self.save_profile(profile)

    async def list_public_active_profiles(self) -> List[Profile]:
        """Every public, active profile with skills, newest first"""
        stmt = self._with_skills(
            select(Profile)
            .where(Profile.is_public == True, Profile.status == ProfileStatusEnum.active)
            .order_by(Profile.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_all_profiles(self) -> List[Profile]:
        stmt = self._with_skills(select(Profile).order_by(Profile.created_at.desc()))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_active_profile_ids(self) -> List[str]:
        stmt = select(Profile.id).where(Profile.status == ProfileStatusEnum.active)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_profiles(self) -> int:
        result = await self.db.execute(select(func.count(Profile.id)))
        return result.scalar_one()

    async def delete_profile(self, profile: Profile) -> None:
        """
        Hard delete with every dependent row.
        Explicit deletes: FK cascades are not guaranteed on every backend.
        """
        profile_id = profile.id
        swap_ids = select(SwapRequest.id).where(
            or_(SwapRequest.requester_id == profile_id, SwapRequest.recipient_id == profile_id)
        )
        try:
            await self.db.execute(delete(Feedback).where(
                or_(
                    Feedback.reviewer_id == profile_id,
                    Feedback.reviewee_id == profile_id,
                    Feedback.swap_session_id.in_(swap_ids),
                )
            ))
            await self.db.execute(delete(SwapRequest).where(
                or_(SwapRequest.requester_id == profile_id, SwapRequest.recipient_id == profile_id)
            ))
            await self.db.execute(delete(UserSkillOffered).where(UserSkillOffered.user_id == profile_id))
            await self.db.execute(delete(UserSkillWanted).where(UserSkillWanted.user_id == profile_id))
            await self.db.execute(delete(Notification).where(Notification.user_id == profile_id))
            await self.db.execute(delete(Profile).where(Profile.id == profile_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Deleting profile {profile_id} failed: {e}", exc_info=True)
            raise
