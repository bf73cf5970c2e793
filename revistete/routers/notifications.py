from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.models.user import User
from revistete.schemas.common import MessageEnvelope
from revistete.schemas.notification import (
    NotificationResponse, NotificationListResponse, NotificationEnvelope,
    MarkAllReadResponse, UnreadCountResponse,
)
from revistete.services import notifications as notification_service
from revistete.api.deps import get_current_active_user
from uuid import UUID

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(notification_service.DEFAULT_LIMIT, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    items, unread_count = notification_service.list_notifications(
        db, current_user.id, unread_only=unread_only, limit=limit
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        unread_count=unread_count,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return UnreadCountResponse(unread_count=notification_service.count_unread(db, current_user.id))


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    modified = notification_service.mark_all_read(db, current_user.id)
    return MarkAllReadResponse(
        message=f"{modified} notifications marked as read",
        modified_count=modified,
    )


@router.put("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notification = notification_service.mark_read(db, notification_id, current_user.id)
    return NotificationEnvelope(notification=NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}", response_model=MessageEnvelope)
async def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    notification_service.delete_notification(db, notification_id, current_user.id)
    return MessageEnvelope(message="Notification deleted")
