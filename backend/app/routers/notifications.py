"""In-app notifications addressed to the calling actor."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_actor
from app.core.database import get_db
from app.repositories.notification_repository import NotificationRepository
from app.schemas.notification import NotificationCountResponse, NotificationResponse
from app.schemas.user import Actor

router = APIRouter()

MISSING_HEADERS = {401: {"description": "Missing actor headers"}}


def get_repository(db: Session = Depends(get_db)) -> NotificationRepository:
    return NotificationRepository(db)


@router.get(
    "/",
    response_model=list[NotificationResponse],
    summary="List notifications",
    responses=MISSING_HEADERS,
)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    category: str | None = Query(default=None, description="invoice or payment"),
    is_read: bool | None = None,
    repo: NotificationRepository = Depends(get_repository),
    actor: Actor = Depends(get_current_actor),
) -> list[NotificationResponse]:
    """The actor's notifications, newest first."""
    notifications = repo.get_all(actor.id, skip, limit, category=category, is_read=is_read)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Count unread notifications",
    responses=MISSING_HEADERS,
)
async def get_unread_count(
    repo: NotificationRepository = Depends(get_repository),
    actor: Actor = Depends(get_current_actor),
) -> NotificationCountResponse:
    return NotificationCountResponse(unread_count=repo.count_unread(actor.id))


@router.post(
    "/read_all",
    response_model=NotificationCountResponse,
    summary="Mark all notifications as read",
    responses=MISSING_HEADERS,
)
async def mark_all_as_read(
    repo: NotificationRepository = Depends(get_repository),
    actor: Actor = Depends(get_current_actor),
) -> NotificationCountResponse:
    """Returns how many notifications were marked."""
    return NotificationCountResponse(unread_count=repo.mark_all_as_read(actor.id))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={**MISSING_HEADERS, 404: {"description": "Notification not found"}},
)
async def mark_as_read(
    notification_id: UUID,
    repo: NotificationRepository = Depends(get_repository),
    actor: Actor = Depends(get_current_actor),
) -> NotificationResponse:
    notification = repo.mark_as_read(notification_id, actor.id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.model_validate(notification)
