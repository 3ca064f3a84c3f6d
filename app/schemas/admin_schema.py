# app/schemas/admin_schema.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, Literal, Optional


class UserStatusAction(BaseModel):
    action: Literal["activate", "suspend", "ban"]


class SkillModeration(BaseModel):
    action: Literal["approve", "reject"]


class GlobalMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)


class AdminActionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    admin_id: str
    action_type: str
    target_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class PlatformStatsOut(BaseModel):
    total_users: int
    total_skills: int
    total_swaps: int
    total_feedback: int


class SwapStatsOut(BaseModel):
    total: int
    pending: int
    accepted: int
    rejected: int
    completed: int
