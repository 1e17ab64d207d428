"""Notification model for in-app notifications."""

from sqlalchemy import Boolean, Column, String

from app.core.database import Base
from app.models.shared import UTCDateTime, UUIDType, generate_uuid, utc_now


class Notification(Base):
    """Notification addressed to one actor (provider or purchaser)."""

    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(String(100), nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(UUIDType, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
