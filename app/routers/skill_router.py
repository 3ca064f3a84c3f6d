# app/routers/skill_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import get_current_identity, get_current_profile
from app.models.profile import Profile
from app.models.skill import UserSkillOffered, UserSkillWanted
from app.services.skill_service import SkillService
from app.schemas.skill_schema import (
    SkillOut, SkillCreate,
    UserSkillOfferedCreate, UserSkillOfferedOut,
    UserSkillWantedCreate, UserSkillWantedOut,
)
from typing import List

router = APIRouter(
    prefix="/skills",
    tags=["Skills"],
    dependencies=[Depends(get_current_identity)] # must be signed in
)

@router.get("", response_model=List[SkillOut])
async def get_approved_skills(db: AsyncSession = Depends(get_db)):
    """
    Approved skills, for the skill picker
    """
    service = SkillService(db)
    return await service.get_approved_skills()

@router.post("", response_model=SkillOut)
async def get_or_create_skill(
    skill_data: SkillCreate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Look a skill up by name (case-insensitive); unknown names are created
    unapproved.
    """
    service = SkillService(db)
    return await service.create_skill(skill_data)


# The caller's own offered / wanted lists
my_skills_router = APIRouter(
    prefix="/profiles/me/skills",
    tags=["Skills"],
    dependencies=[Depends(get_current_profile)]
)

@my_skills_router.get("/offered", response_model=List[UserSkillOfferedOut])
async def list_offered_skills(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = SkillService(db)
    return await service.list_offered_skills(current_profile)

@my_skills_router.post("/offered", response_model=UserSkillOfferedOut, status_code=status.HTTP_201_CREATED)
async def add_offered_skill(
    data: UserSkillOfferedCreate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a skill the caller can teach. The skill is created if unknown.
    """
    service = SkillService(db)
    return await service.add_offered_skill(current_profile, data)

@my_skills_router.delete("/offered/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_offered_skill(
    link_id: str,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = SkillService(db)
    await service.remove_skill_link(UserSkillOffered, link_id, current_profile)
    return

@my_skills_router.get("/wanted", response_model=List[UserSkillWantedOut])
async def list_wanted_skills(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = SkillService(db)
    return await service.list_wanted_skills(current_profile)

@my_skills_router.post("/wanted", response_model=UserSkillWantedOut, status_code=status.HTTP_201_CREATED)
async def add_wanted_skill(
    data: UserSkillWantedCreate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Add a skill the caller wants to learn.
    """
    service = SkillService(db)
    return await service.add_wanted_skill(current_profile, data)

@my_skills_router.delete("/wanted/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_wanted_skill(
    link_id: str,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = SkillService(db)
    await service.remove_skill_link(UserSkillWanted, link_id, current_profile)
    return
