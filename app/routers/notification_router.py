# app/routers/notification_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.models.profile import Profile
from app.core.security import get_current_profile
from app.services.notification_service import NotificationService
from app.schemas.notification_schema import NotificationOut

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)

@router.get(
    "/my",
    response_model=List[NotificationOut],
    summary="My latest notifications"
)
async def get_my_notifications(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    The caller's 20 latest notifications, newest first.
    """
    service = NotificationService(db)
    return await service.get_my_notifications(current_profile)

@router.patch(
    "/{notification_id}/read",
    response_model=NotificationOut,
    summary="Mark a notification as read"
)
async def mark_as_read(
    notification_id: str,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    return await service.mark_notification_as_read(notification_id, current_profile)
