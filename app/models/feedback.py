# app/models/feedback.py
import uuid
from sqlalchemy import (
    Column, Text, Boolean, INT, ForeignKey, TIMESTAMP, CHAR, UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from app.core.database import Base


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        # One review per reviewer per swap
        UniqueConstraint("swap_session_id", "reviewer_id", name="uq_feedback_swap_reviewer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    swap_session_id = Column(CHAR(36), ForeignKey("swap_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewee_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(INT, nullable=False)
    comment = Column(Text)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    reviewer = relationship("Profile", foreign_keys=[reviewer_id], lazy="selectin")
    reviewee = relationship("Profile", foreign_keys=[reviewee_id], lazy="selectin")
