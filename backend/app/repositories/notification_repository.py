"""Notification data access, always scoped to the recipient actor."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Query, Session

from app.models.notification import Notification
from app.models.shared import generate_uuid


class NotificationRepository:
    def __init__(self, db: Session):
        self.db = db

    def _for_user(self, user_id: str) -> Query:  # type: ignore[type-arg]
        return self.db.query(Notification).filter(Notification.user_id == user_id)

    def _unread(self, user_id: str) -> Query:  # type: ignore[type-arg]
        return self._for_user(user_id).filter(Notification.is_read == False)  # noqa: E712

    def add(
        self,
        *,
        user_id: str,
        category: str,
        title: str,
        message: str,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification:
        """Stage a notification in the caller's transaction."""
        notification = Notification(
            id=generate_uuid(),
            user_id=user_id,
            category=category,
            title=title,
            message=message,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def get_for_user(self, notification_id: UUID, user_id: str) -> Notification | None:
        return self._for_user(user_id).filter(Notification.id == notification_id).first()

    def get_all(
        self,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        is_read: bool | None = None,
    ) -> list[Notification]:
        """Newest first."""
        query = self._for_user(user_id)
        if category is not None:
            query = query.filter(Notification.category == category)
        if is_read is not None:
            query = query.filter(Notification.is_read == is_read)
        return (
            query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()
        )

    def count_unread(self, user_id: str) -> int:
        return self._unread(user_id).count()

    def mark_as_read(self, notification_id: UUID, user_id: str) -> Notification | None:
        """Returns None when the notification is unknown or addressed to someone else."""
        notification = self.get_for_user(notification_id, user_id)
        if notification is None:
            return None
        notification.is_read = True  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        count = self._unread(user_id).update({"is_read": True}, synchronize_session=False)
        self.db.commit()
        return count
