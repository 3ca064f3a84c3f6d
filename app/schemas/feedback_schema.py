# app/schemas/feedback_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, Optional

from app.schemas.profile_schema import ProfileBrief


class FeedbackCreate(BaseModel):
    swap_session_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    is_public: bool = True


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    swap_session_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    is_public: bool
    created_at: Optional[datetime] = None
    reviewer: Optional[ProfileBrief] = None


class FeedbackSummaryOut(BaseModel):
    average_rating: float
    total_reviews: int
    positive_reviews: int
    distribution: Dict[int, int]
    total_swaps: int = 0
