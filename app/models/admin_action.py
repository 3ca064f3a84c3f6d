# app/models/admin_action.py
import uuid
from sqlalchemy import Column, String, JSON, CHAR, TIMESTAMP, func
from app.core.database import Base


class AdminAction(Base):
    """Append-only audit trail of admin mutations"""
    __tablename__ = "admin_actions"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # No FK: the trail outlives deleted profiles
    admin_id = Column(CHAR(36), nullable=False, index=True)
    action_type = Column(String(100), nullable=False)
    target_id = Column(CHAR(36), nullable=True)
    details = Column(JSON)
    created_at = Column(TIMESTAMP, server_default=func.now())
