# app/schemas/profile_schema.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from app.models.profile import ProfileStatusEnum
from app.schemas.skill_schema import UserSkillOfferedOut, UserSkillWantedOut


class ProfileBase(BaseModel):
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(None, max_length=500, description="Avatar URL")
    location: str | None = Field(None, max_length=255)
    availability: str = Field("weekends", max_length=100)
    is_public: bool = True
    bio: str | None = None


# PUT /profiles/me: every field optional, only sent fields are written
class ProfileUpdate(BaseModel):
    full_name: str | None = Field(None, max_length=255)
    avatar_url: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    # NOT NULL columns: may be omitted but never sent as null
    availability: str = Field(None, max_length=100)
    is_public: bool = None
    bio: str | None = None


class ProfileOut(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    clerk_id: str
    email: str
    rating: float
    total_swaps: int
    status: ProfileStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileWithSkillsOut(ProfileOut):
    skills_offered: List[UserSkillOfferedOut] = []
    skills_wanted: List[UserSkillWantedOut] = []


class ProfileBrief(BaseModel):
    """
    Compact view of the other party, shown on swap requests and feedback
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    clerk_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    rating: float
    skills_offered: List[UserSkillOfferedOut] = []


# Suggested swap partner
class ProfileMatchOut(BaseModel):
    profile: ProfileWithSkillsOut
    match_score: float = Field(..., description="Match score")

    class Config:
        from_attributes = True
