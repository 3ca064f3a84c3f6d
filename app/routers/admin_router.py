# app/routers/admin_router.py

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal, Optional

from app.core.database import get_db
from app.core.security import require_admin
from app.models.profile import Profile
from app.services.admin_service import AdminService
from app.schemas.admin_schema import (
    UserStatusAction, SkillModeration, GlobalMessageCreate,
    AdminActionOut, PlatformStatsOut, SwapStatsOut,
)
from app.schemas.profile_schema import ProfileOut, ProfileWithSkillsOut
from app.schemas.skill_schema import SkillOut, AdminSkillCreate
from app.schemas.swap_request_schema import SwapRequestWithPartiesOut

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)]
)

# --- Users ---
@router.get("/users", response_model=List[ProfileWithSkillsOut])
async def list_users(db: AsyncSession = Depends(get_db)):
    """
    Every profile regardless of status, newest first
    """
    service = AdminService(db)
    return await service.list_users()

@router.patch("/users/{profile_id}/status", response_model=ProfileOut)
async def update_user_status(
    profile_id: str,
    data: UserStatusAction,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    activate / suspend / ban a member
    """
    service = AdminService(db)
    return await service.update_user_status(admin, profile_id, data.action)

@router.delete("/users/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    profile_id: str,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Remove a member with their skills, swap requests, feedback and notifications
    """
    service = AdminService(db)
    await service.delete_user(admin, profile_id)
    return

# --- Skills ---
@router.get("/skills", response_model=List[SkillOut])
async def list_skills(db: AsyncSession = Depends(get_db)):
    service = AdminService(db)
    return await service.list_skills()

@router.post("/skills", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
async def add_skill(
    data: AdminSkillCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = AdminService(db)
    return await service.add_skill(admin, data)

@router.patch("/skills/{skill_id}", response_model=Optional[SkillOut])
async def moderate_skill(
    skill_id: str,
    data: SkillModeration,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    approve: the skill becomes public.
    reject: the skill and every profile link to it are deleted (returns null).
    """
    service = AdminService(db)
    return await service.moderate_skill(admin, skill_id, data.action)

# --- Read-only views ---
@router.get("/swap-requests", response_model=List[SwapRequestWithPartiesOut])
async def list_swap_requests(db: AsyncSession = Depends(get_db)):
    service = AdminService(db)
    return await service.list_swap_requests()

@router.get("/stats", response_model=PlatformStatsOut)
async def get_platform_stats(db: AsyncSession = Depends(get_db)):
    service = AdminService(db)
    return await service.get_platform_stats()

@router.get("/swap-stats", response_model=SwapStatsOut)
async def get_swap_stats(db: AsyncSession = Depends(get_db)):
    service = AdminService(db)
    return await service.get_swap_stats()

@router.get("/actions", response_model=List[AdminActionOut])
async def list_admin_actions(db: AsyncSession = Depends(get_db)):
    """
    The 50 latest audit rows
    """
    service = AdminService(db)
    return await service.list_actions()

# --- Broadcast ---
@router.post("/messages")
async def send_global_message(
    data: GlobalMessageCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Notify every active member
    """
    service = AdminService(db)
    sent = await service.send_global_message(admin, data.message)
    return {"status": "success", "recipients": sent}

# --- Reports ---
@router.get("/reports/{report_type}", response_class=Response)
async def download_report(
    report_type: Literal["users", "swaps", "feedback"],
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    CSV download of users, swaps or feedback
    """
    service = AdminService(db)
    content = await service.build_report(admin, report_type)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={report_type}_report.csv"},
    )
