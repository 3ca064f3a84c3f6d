# app/models/swap_request.py
import enum
import uuid
from sqlalchemy import Column, String, Text, ForeignKey, TIMESTAMP, CHAR, Enum, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class SwapStatusEnum(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    completed = "completed"


class SwapRequest(Base):
    __tablename__ = "swap_requests"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    requester_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # Optional: which skill each side brings to the swap
    requester_skill_id = Column(CHAR(36), ForeignKey("skills.id", ondelete="SET NULL"), nullable=True)
    recipient_skill_id = Column(CHAR(36), ForeignKey("skills.id", ondelete="SET NULL"), nullable=True)

    message = Column(Text)
    status = Column(
        Enum(SwapStatusEnum, values_callable=lambda obj: [e.value for e in obj], name="swap_status_enum"),
        nullable=False,
        default=SwapStatusEnum.pending,
    )

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
    expires_at = Column(TIMESTAMP, nullable=True)

    # Both parties are Profile rows, so foreign_keys must be explicit
    requester = relationship("Profile", foreign_keys=[requester_id], lazy="selectin")
    recipient = relationship("Profile", foreign_keys=[recipient_id], lazy="selectin")

    requester_skill = relationship("Skill", foreign_keys=[requester_skill_id], lazy="selectin")
    recipient_skill = relationship("Skill", foreign_keys=[recipient_skill_id], lazy="selectin")
