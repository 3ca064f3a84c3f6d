# app/services/admin_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from app.models.admin_action import AdminAction
from app.models.profile import Profile, ProfileStatusEnum
from app.models.skill import Skill
from app.repositories.admin_repo import AdminActionRepository
from app.repositories.feedback_repo import FeedbackRepository
from app.repositories.profile_repo import ProfileRepository
from app.repositories.skill_repo import SkillRepository
from app.repositories.swap_request_repo import SwapRequestRepository
from app.schemas.skill_schema import AdminSkillCreate
from app.schemas.profile_schema import ProfileOut
from app.services.notification_service import NotificationService
from app.services.realtime_service import publish_profile_change
from app.utils.csv_export import rows_to_csv

logger = logging.getLogger(__name__)

# activate|suspend|ban -> stored profile status
STATUS_FOR_ACTION = {
    "activate": ProfileStatusEnum.active,
    "suspend": ProfileStatusEnum.inactive,
    "ban": ProfileStatusEnum.banned,
}

REPORT_TYPES = ("users", "swaps", "feedback")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _enum_value(value):
    return getattr(value, "value", value)


class AdminService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.action_repo = AdminActionRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.skill_repo = SkillRepository(db)
        self.swap_repo = SwapRequestRepository(db)
        self.feedback_repo = FeedbackRepository(db)
        self.notification_service = NotificationService(db)

    def _stage_audit(self, admin: Profile, action_type: str, target_id: Optional[str] = None,
                     details: Optional[Dict[str, Any]] = None) -> AdminAction:
        logger.info(f"Admin {admin.id}: {action_type} target={target_id}")
        return self.action_repo.stage_action(AdminAction(
            admin_id=admin.id,
            action_type=action_type,
            target_id=target_id,
            details=details or {},
        ))

    # --- Users ---
    async def list_users(self) -> List[Profile]:
        return await self.profile_repo.list_all_profiles()

    async def _get_profile_or_404(self, profile_id: str) -> Profile:
        profile = await self.profile_repo.get_by_id(profile_id)
        if not profile:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "User not found")
        return profile

    async def update_user_status(self, admin: Profile, profile_id: str, action: str) -> Profile:
        if profile_id == admin.id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "You cannot change your own status")

        profile = await self._get_profile_or_404(profile_id)
        profile.status = STATUS_FOR_ACTION[action]
        self._stage_audit(admin, f"user_{action}", profile.id, {"status": profile.status.value})

        updated = await self.profile_repo.save_profile(profile)
        await publish_profile_change("UPDATE", new=updated)
        return updated

    async def delete_user(self, admin: Profile, profile_id: str) -> None:
        if profile_id == admin.id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "You cannot delete your own account")

        profile = await self._get_profile_or_404(profile_id)
        old = ProfileOut.model_validate(profile)

        # Staged before the bulk deletes so the same commit writes it
        self._stage_audit(admin, "user_delete", profile_id, {"email": old.email, "full_name": old.full_name})
        await self.profile_repo.delete_profile(profile)

        await publish_profile_change("DELETE", old=old)

    # --- Skills ---
    async def list_skills(self) -> List[Skill]:
        return await self.skill_repo.list_all_skills()

    async def add_skill(self, admin: Profile, data: AdminSkillCreate) -> Skill:
        name = data.name.strip()
        if await self.skill_repo.get_skill_by_name(name):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "A skill with this name already exists")

        skill = Skill(name=name, category=data.category, description=data.description, is_approved=True)
        try:
            self.db.add(skill)
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "A skill with this name already exists")

        self._stage_audit(admin, "skill_add", skill.id, {"name": name, "category": data.category})
        return await self.skill_repo.update_skill(skill)

    async def moderate_skill(self, admin: Profile, skill_id: str, action: str) -> Optional[Skill]:
        """approve flips is_approved; reject removes the skill and its links"""
        skill = await self.skill_repo.get_skill_by_id(skill_id)
        if not skill:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Skill not found")

        self._stage_audit(admin, f"skill_{action}", skill.id, {"name": skill.name})

        if action == "approve":
            skill.is_approved = True
            return await self.skill_repo.update_skill(skill)

        await self.skill_repo.delete_skill(skill)
        return None

    # --- Read-only views ---
    async def list_swap_requests(self):
        return await self.swap_repo.list_all()

    async def get_platform_stats(self) -> Dict[str, int]:
        swap_counts = await self.swap_repo.count_by_status()
        return {
            "total_users": await self.profile_repo.count_profiles(),
            "total_skills": await self.skill_repo.count_skills(),
            "total_swaps": sum(swap_counts.values()),
            "total_feedback": await self.feedback_repo.count_feedback(),
        }

    async def get_swap_stats(self) -> Dict[str, int]:
        counts = await self.swap_repo.count_by_status()
        return {
            "total": sum(counts.values()),
            "pending": counts.get("pending", 0),
            "accepted": counts.get("accepted", 0),
            "rejected": counts.get("rejected", 0),
            "completed": counts.get("completed", 0),
        }

    async def list_actions(self) -> List[AdminAction]:
        return await self.action_repo.list_recent_actions()

    # --- Broadcast ---
    async def send_global_message(self, admin: Profile, message: str) -> int:
        user_ids = await self.profile_repo.list_active_profile_ids()
        sent = self.notification_service.stage_global_message(user_ids, message)
        self._stage_audit(admin, "global_message", None, {"message": message, "recipients": sent})
        await self.db.commit()
        return sent

    # --- Reports ---
    async def _report_rows(self, report_type: str) -> List[Dict[str, Any]]:
        if report_type == "users":
            return [
                {
                    "id": p.id,
                    "clerk_id": p.clerk_id,
                    "email": p.email,
                    "full_name": p.full_name,
                    "location": p.location,
                    "availability": p.availability,
                    "is_public": p.is_public,
                    "rating": p.rating,
                    "total_swaps": p.total_swaps,
                    "status": _enum_value(p.status),
                    "skills_offered": "; ".join(link.skill.name for link in p.skills_offered if link.skill),
                    "skills_wanted": "; ".join(link.skill.name for link in p.skills_wanted if link.skill),
                    "created_at": _iso(p.created_at),
                }
                for p in await self.profile_repo.list_all_profiles()
            ]

        if report_type == "swaps":
            return [
                {
                    "id": s.id,
                    "requester_id": s.requester_id,
                    "requester_name": s.requester.full_name if s.requester else None,
                    "recipient_id": s.recipient_id,
                    "recipient_name": s.recipient.full_name if s.recipient else None,
                    "status": _enum_value(s.status),
                    "message": s.message,
                    "created_at": _iso(s.created_at),
                    "updated_at": _iso(s.updated_at),
                    "expires_at": _iso(s.expires_at),
                }
                for s in await self.swap_repo.list_all()
            ]

        return [
            {
                "id": f.id,
                "swap_session_id": f.swap_session_id,
                "reviewer_id": f.reviewer_id,
                "reviewee_id": f.reviewee_id,
                "rating": f.rating,
                "comment": f.comment,
                "is_public": f.is_public,
                "created_at": _iso(f.created_at),
            }
            for f in await self.feedback_repo.list_all()
        ]

    async def build_report(self, admin: Profile, report_type: str) -> str:
        if report_type not in REPORT_TYPES:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Unknown report type")

        rows = await self._report_rows(report_type)
        await self.action_repo.create_action(AdminAction(
            admin_id=admin.id,
            action_type="report_download",
            details={"report_type": report_type, "rows": len(rows)},
        ))
        logger.info(f"Admin {admin.id}: report_download {report_type} ({len(rows)} rows)")
        return rows_to_csv(rows)
