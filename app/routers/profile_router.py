# app/routers/profile_router.py
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import get_current_identity, get_current_profile
from app.models.profile import Profile
from app.schemas.identity_schema import IdentityUser
from app.services.match_service import MatchService
from app.services.profile_service import ProfileService
from app.schemas.profile_schema import (
    ProfileUpdate, ProfileOut, ProfileWithSkillsOut, ProfileMatchOut
)
from typing import List, Optional

import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profiles",
    tags=["Profiles"],
    dependencies=[Depends(get_current_identity)]
)


@router.post("/sync", response_model=Optional[ProfileWithSkillsOut])
async def sync_my_profile(
    identity: IdentityUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Create or refresh the caller's profile from the identity provider.
    Called on every session load; returns null if the database write failed.
    """
    service = ProfileService(db)
    return await service.sync_profile(identity)


@router.get("/me", response_model=Optional[ProfileWithSkillsOut])
async def get_my_profile(
    identity: IdentityUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    The caller's profile, or 200 with a null body before the first sync.
    """
    service = ProfileService(db)
    return await service.get_my_profile(identity)


@router.put("/me", response_model=ProfileWithSkillsOut)
async def update_my_profile(
    update_data: ProfileUpdate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    return await service.update_my_profile(current_profile, update_data)


@router.post("/me/photo", response_model=ProfileOut)
async def upload_my_photo(
    file: UploadFile = File(...),
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload a profile photo (multipart field `file`, images only).
    Replaces the previously uploaded photo.
    """
    service = ProfileService(db)
    return await service.upload_photo(current_profile, file)


@router.delete("/me/photo", response_model=ProfileOut)
async def delete_my_photo(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    return await service.remove_photo(current_profile)


@router.get("", response_model=List[ProfileWithSkillsOut], summary="Browse public profiles")
async def browse_profiles(
    q: str = Query("", description="Matches name, location or skill names"),
    category: Optional[str] = Query(None, description="Offered skill category, 'all' for any"),
    skill_id: Optional[str] = Query(None),
    identity: IdentityUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    Public, active profiles (newest first) except the caller's own.
    """
    service = ProfileService(db)
    viewer = await service.get_my_profile(identity)
    return await service.browse_profiles(viewer, query=q, category=category, skill_id=skill_id)


@router.get("/matches", response_model=List[ProfileMatchOut], summary="Suggested swap partners")
async def get_matches(
    limit: int = Query(10, ge=1),
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    # server-side cap
    limit = min(limit, 50)

    service = MatchService(db)
    return await service.suggest_matches(current_profile, limit=limit)


@router.get("/{profile_id}", response_model=ProfileWithSkillsOut)
async def get_profile(
    profile_id: str,
    identity: IdentityUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """
    One profile with its skills. Private or deactivated profiles are
    only visible to their owner.
    """
    service = ProfileService(db)
    viewer = await service.get_my_profile(identity)
    return await service.get_profile(profile_id, viewer)
