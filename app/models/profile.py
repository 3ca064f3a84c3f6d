# app/models/profile.py
import enum
import uuid
from sqlalchemy import (
    Column, String, TEXT, Boolean, Float, INT, TIMESTAMP, CHAR, Enum, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base


class ProfileStatusEnum(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    banned = "banned"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Identity provider user id (one profile per account)
    clerk_id = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=False, default="")
    full_name = Column(String(255))
    avatar_url = Column(String(500))
    location = Column(String(255))
    availability = Column(String(100), nullable=False, default="weekends")
    is_public = Column(Boolean, nullable=False, default=True)
    bio = Column(TEXT)
    rating = Column(Float, nullable=False, default=0)
    total_swaps = Column(INT, nullable=False, default=0)
    status = Column(
        Enum(ProfileStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="profile_status_enum"),
        nullable=False,
        default=ProfileStatusEnum.active,
    )
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Skills this user can teach
    skills_offered = relationship(
        "UserSkillOffered",
        back_populates="profile",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    # Skills this user wants to learn
    skills_wanted = relationship(
        "UserSkillWanted",
        back_populates="profile",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
