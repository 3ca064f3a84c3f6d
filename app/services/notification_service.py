# app/services/notification_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from typing import List, Optional

from app.models.profile import Profile
from app.models.notification import Notification
from app.repositories.notification_repo import NotificationRepository

import logging

logger = logging.getLogger(__name__)

class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = NotificationRepository(db)

    def stage_notification(
        self,
        user_id: str,
        title: str,
        link_url: Optional[str] = None,
        message: Optional[str] = None,
        kind: str = "swap_request",
    ) -> Notification:
        """
        (internal) Queue a notification in the session. The calling service's
        commit writes it together with the change that triggered it.
        """
        notification = Notification(
            user_id=user_id,
            kind=kind,
            title=title,
            message=message,
            link_url=link_url,
            is_read=False
        )
        self.repo.stage_notifications([notification])
        logger.info(f"Notification queued for {user_id}: {title}")
        return notification

    def stage_global_message(self, user_ids: List[str], message: str) -> int:
        """(internal) One 'global_message' notification per profile"""
        notifications = [
            Notification(
                user_id=user_id,
                kind="global_message",
                title="Message from the SkillSwap team",
                message=message,
                is_read=False,
            )
            for user_id in user_ids
        ]
        self.repo.stage_notifications(notifications)
        return len(notifications)

    async def get_my_notifications(self, profile: Profile) -> List[Notification]:
        return await self.repo.list_notifications_by_user(profile.id)

    async def mark_notification_as_read(
        self,
        notification_id: str,
        profile: Profile
    ) -> Notification:
        notification = await self.repo.get_notification_by_id(notification_id)

        if not notification:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Notification not found")

        # Only the recipient may mark it
        if notification.user_id != profile.id:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Not your notification")

        if notification.is_read:
            return notification

        return await self.repo.mark_as_read(notification)
