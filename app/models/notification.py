# app/models/notification.py

import uuid
from sqlalchemy import Column, String, TEXT, BOOLEAN, CHAR, ForeignKey, TIMESTAMP, func
from app.core.database import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Receiving profile
    user_id = Column(CHAR(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # 'global_message' | 'swap_request'
    kind = Column(String(50), nullable=False, default="swap_request")
    title = Column(String(255), nullable=False)
    message = Column(TEXT)

    # Front-end route to open when the notification is clicked
    link_url = Column(String(500))

    is_read = Column(BOOLEAN, default=False, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
