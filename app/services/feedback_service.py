# app/services/feedback_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from typing import List
import logging

from app.models.feedback import Feedback
from app.models.profile import Profile, ProfileStatusEnum
from app.models.swap_request import SwapStatusEnum
from app.repositories.feedback_repo import FeedbackRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.swap_request_repo import SwapRequestRepository
from app.schemas.feedback_schema import FeedbackCreate
from app.utils.rating_stats import average_rating, summarize_ratings
from app.utils.swap_lifecycle import party_role, partner_of

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = FeedbackRepository(db)
        self.swap_repo = SwapRequestRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def leave_feedback(self, reviewer: Profile, data: FeedbackCreate) -> Feedback:
        """
        Review the other party of a completed swap. The reviewee's stored
        rating is refreshed in the same commit.
        """
        swap = await self.swap_repo.get_swap_request_by_id(data.swap_session_id)
        if not swap:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Swap not found")

        if party_role(swap, reviewer.id) is None:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "You are not part of this swap")

        if swap.status != SwapStatusEnum.completed:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Feedback can only be left on completed swaps")

        if await self.repo.find_existing(swap.id, reviewer.id):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "You already left feedback for this swap")

        reviewee = partner_of(swap, reviewer.id)

        ratings = await self.repo.list_ratings_for(reviewee.id)
        reviewee.rating = average_rating(ratings + [data.rating])

        feedback = Feedback(
            swap_session_id=swap.id,
            reviewer_id=reviewer.id,
            reviewee_id=reviewee.id,
            rating=data.rating,
            comment=data.comment,
            is_public=data.is_public,
        )
        created = await self.repo.create_feedback(feedback)
        logger.info(f"Feedback {created.id} on swap {swap.id}; {reviewee.id} now rated {reviewee.rating}")
        return created

    async def get_received_feedback(self, profile: Profile) -> List[Feedback]:
        return await self.repo.list_received(profile.id)

    async def get_summary(self, profile: Profile) -> dict:
        ratings = await self.repo.list_ratings_for(profile.id)
        summary = summarize_ratings(ratings)
        summary["total_swaps"] = profile.total_swaps or 0
        return summary

    async def get_public_feedback(self, profile_id: str) -> List[Feedback]:
        profile = await self.profile_repo.get_by_id(profile_id)
        if not profile or not profile.is_public or profile.status != ProfileStatusEnum.active:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Profile not found")
        return await self.repo.list_received(profile_id, public_only=True)
