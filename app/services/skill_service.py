# app/services/skill_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from typing import List, Optional, Type
import logging

from app.models.profile import Profile
from app.models.skill import Skill, UserSkillOffered, UserSkillWanted
from app.repositories.skill_repo import SkillRepository, SkillLink
from app.schemas.skill_schema import SkillCreate, UserSkillOfferedCreate, UserSkillWantedCreate

logger = logging.getLogger(__name__)


class SkillService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = SkillRepository(db)

    async def get_approved_skills(self) -> List[Skill]:
        return await self.repo.list_approved_skills()

    async def get_or_create_skill(self, name: str, category: Optional[str] = None) -> Skill:
        """
        Case-insensitive lookup by name; unknown names become new,
        unapproved skills
        """
        name = name.strip()
        if not name:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Skill name is required")

        skill = await self.repo.get_skill_by_name(name)
        if skill:
            return skill

        try:
            skill = await self.repo.create_skill(
                Skill(name=name, category=category, is_approved=False)
            )
            logger.info(f"Created unapproved skill {skill.name}")
            return skill
        except IntegrityError:
            # Someone created it in between
            await self.db.rollback()
            skill = await self.repo.get_skill_by_name(name)
            if skill is None:
                raise
            return skill

    async def create_skill(self, skill_data: SkillCreate) -> Skill:
        return await self.get_or_create_skill(skill_data.name, skill_data.category)

    # --- Profile skill links ---
    async def _add_link(self, profile: Profile, skill_name: str, link: SkillLink) -> SkillLink:
        profile_id = profile.id
        skill = await self.get_or_create_skill(skill_name)

        model = type(link)
        if await self.repo.find_link(model, profile_id, skill.id):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, f"'{skill.name}' is already on your list")

        link.user_id = profile_id
        link.skill_id = skill.id
        return await self.repo.add_link(link)

    async def add_offered_skill(self, profile: Profile, data: UserSkillOfferedCreate) -> UserSkillOffered:
        link = UserSkillOffered(
            proficiency_level=data.proficiency_level,
            years_experience=data.years_experience,
        )
        return await self._add_link(profile, data.skill_name, link)

    async def add_wanted_skill(self, profile: Profile, data: UserSkillWantedCreate) -> UserSkillWanted:
        link = UserSkillWanted(urgency=data.urgency)
        return await self._add_link(profile, data.skill_name, link)

    async def list_offered_skills(self, profile: Profile) -> List[UserSkillOffered]:
        return await self.repo.list_links(UserSkillOffered, profile.id)

    async def list_wanted_skills(self, profile: Profile) -> List[UserSkillWanted]:
        return await self.repo.list_links(UserSkillWanted, profile.id)

    async def remove_skill_link(self, model: Type[SkillLink], link_id: str, profile: Profile) -> None:
        link = await self.repo.get_link(model, link_id)
        if not link:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Skill link not found")

        if link.user_id != profile.id:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "You can only remove your own skills")

        await self.repo.delete_link(link)
