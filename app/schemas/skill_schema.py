# app/schemas/skill_schema.py
from pydantic import BaseModel, Field
from typing import Optional


class SkillOut(BaseModel):
    id: str
    name: str
    category: str | None = None
    description: str | None = None
    is_approved: bool

    class Config:
        from_attributes = True


# Get-or-create by name (user side)
class SkillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=100)


# Admin: add an approved skill
class AdminSkillCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


# --- Profile skill links ---
class UserSkillOfferedCreate(BaseModel):
    skill_name: str = Field(..., min_length=1, max_length=100)
    proficiency_level: str = Field("intermediate", max_length=50)
    years_experience: Optional[int] = Field(None, ge=0)


class UserSkillWantedCreate(BaseModel):
    skill_name: str = Field(..., min_length=1, max_length=100)
    urgency: str = Field("medium", max_length=50)


class UserSkillOfferedOut(BaseModel):
    id: str
    proficiency_level: str
    years_experience: Optional[int] = None
    skill: SkillOut

    class Config:
        from_attributes = True


class UserSkillWantedOut(BaseModel):
    id: str
    urgency: str
    skill: SkillOut

    class Config:
        from_attributes = True
