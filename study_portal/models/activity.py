"""Audit Log Model"""

from sqlalchemy import Column, String, JSON, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel


class ActivityLog(BaseModel):
    """Append-only record of user actions (document views, uploads)"""
    __tablename__ = "activity_logs"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)
    resource = Column(String(255), nullable=True)  # e.g. "document:<id>"
    details = Column(JSON, nullable=True)

    user = relationship("User")
