# app/models/skill.py
import uuid
from sqlalchemy import Column, String, TEXT, Boolean, ForeignKey, INT, CHAR, TIMESTAMP, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Skill(Base):
    __tablename__ = "skills"
    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)
    category = Column(String(100))
    description = Column(TEXT)
    # User-created skills start unapproved, admin-created ones approved
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, server_default=func.now())


class UserSkillOffered(Base):
    __tablename__ = "user_skills_offered"
    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(CHAR(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    proficiency_level = Column(String(50), nullable=False, default="intermediate")
    years_experience = Column(INT, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    skill = relationship("Skill", lazy="selectin")
    profile = relationship("Profile", back_populates="skills_offered")


class UserSkillWanted(Base):
    __tablename__ = "user_skills_wanted"
    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(CHAR(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False, index=True)
    urgency = Column(String(50), nullable=False, default="medium")
    created_at = Column(TIMESTAMP, server_default=func.now())

    skill = relationship("Skill", lazy="selectin")
    profile = relationship("Profile", back_populates="skills_wanted")
