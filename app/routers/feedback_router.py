# app/routers/feedback_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.security import get_current_identity, get_current_profile
from app.models.profile import Profile
from app.services.feedback_service import FeedbackService
from app.schemas.feedback_schema import FeedbackCreate, FeedbackOut, FeedbackSummaryOut

router = APIRouter(
    prefix="/feedback",
    tags=["Feedback"],
    dependencies=[Depends(get_current_identity)]
)

@router.post("", response_model=FeedbackOut, status_code=status.HTTP_201_CREATED)
async def leave_feedback(
    data: FeedbackCreate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Rate the other party of a completed swap (once per swap).
    """
    service = FeedbackService(db)
    return await service.leave_feedback(current_profile, data)

@router.get("/me", response_model=List[FeedbackOut])
async def get_my_feedback(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = FeedbackService(db)
    return await service.get_received_feedback(current_profile)

@router.get("/me/summary", response_model=FeedbackSummaryOut)
async def get_my_feedback_summary(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Average rating, review counts and the 5..1 histogram.
    """
    service = FeedbackService(db)
    return await service.get_summary(current_profile)

@router.get("/users/{profile_id}", response_model=List[FeedbackOut])
async def get_public_feedback(
    profile_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = FeedbackService(db)
    return await service.get_public_feedback(profile_id)
