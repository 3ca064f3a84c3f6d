# app/repositories/skill_repo.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func
from sqlalchemy.orm import selectinload
from app.models.skill import Skill, UserSkillOffered, UserSkillWanted
from typing import List, Optional, Type, Union

SkillLink = Union[UserSkillOffered, UserSkillWanted]


class SkillRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Skills ---
    async def list_approved_skills(self) -> List[Skill]:
        """Approved skills, alphabetical (picker list)"""
        stmt = select(Skill).where(Skill.is_approved == True).order_by(Skill.name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_all_skills(self) -> List[Skill]:
        """Admin view: includes unapproved skills"""
        stmt = select(Skill).order_by(Skill.name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_skill_by_id(self, skill_id: str) -> Optional[Skill]:
        stmt = select(Skill).where(Skill.id == skill_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_skill_by_name(self, name: str) -> Optional[Skill]:
        """Case-insensitive exact lookup"""
        stmt = select(Skill).where(func.lower(Skill.name) == name.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_skill(self, skill: Skill) -> Skill:
        self.db.add(skill)
        await self.db.commit()
        await self.db.refresh(skill)
        return skill

    async def update_skill(self, skill: Skill) -> Skill:
        await self.db.commit()
        await self.db.refresh(skill)
        return skill

    async def delete_skill(self, skill: Skill) -> None:
        """Remove the skill and every profile link to it"""
        await self.db.execute(delete(UserSkillOffered).where(UserSkillOffered.skill_id == skill.id))
        await self.db.execute(delete(UserSkillWanted).where(UserSkillWanted.skill_id == skill.id))
        await self.db.delete(skill)
        await self.db.commit()

    async def count_skills(self) -> int:
        result = await self.db.execute(select(func.count(Skill.id)))
        return result.scalar_one()

    # --- Profile <-> Skill links ---
    async def get_link(self, model: Type[SkillLink], link_id: str) -> Optional[SkillLink]:
        stmt = (
            select(model)
            .where(model.id == link_id)
            .options(selectinload(model.skill))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def find_link(self, model: Type[SkillLink], user_id: str, skill_id: str) -> Optional[SkillLink]:
        stmt = select(model).where(model.user_id == user_id, model.skill_id == skill_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_links(self, model: Type[SkillLink], user_id: str) -> List[SkillLink]:
        stmt = select(model).where(model.user_id == user_id).order_by(model.created_at)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def add_link(self, link: SkillLink) -> SkillLink:
        self.db.add(link)
        await self.db.commit()
        return await self.get_link(type(link), link.id)

    async def delete_link(self, link: SkillLink) -> None:
        await self.db.delete(link)
        await self.db.commit()
