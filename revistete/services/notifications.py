"""Notification store operations.

``create_notification`` is called as a side effect of other writes (a new
message, for now). It never raises: a failed notification is logged and
reported as ``None`` so the triggering operation still succeeds.
"""

import logging
from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from revistete.core import database
from revistete.core.errors import NotFoundError
from revistete.models.base import utcnow
from revistete.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
PREVIEW_LENGTH = 50


def create_notification(
    db: Session,
    user_id: Optional[UUID],
    notification_type: NotificationType,
    title: str,
    body: str,
    related_user_id: Optional[UUID] = None,
    related_garment_id: Optional[UUID] = None,
    related_conversation_id: Optional[UUID] = None,
    metadata: Optional[dict] = None,
) -> Optional[Notification]:
    if not user_id:
        logger.error("Notification skipped: no target user", extra={"error_code": "NOTIFICATION_NO_USER"})
        return None

    notification = Notification(
        user_id=user_id,
        type=notification_type,
        title=title.strip(),
        body=body.strip(),
        related_user_id=related_user_id,
        related_garment_id=related_garment_id,
        related_conversation_id=related_conversation_id,
        extra_data=metadata or {},
    )
    try:
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create notification", extra={"user_id": user_id})
        return None

    logger.info(
        "Notification created",
        extra={"user_id": user_id, "notification_id": notification.id},
    )
    return notification


def message_preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return f"{text[:PREVIEW_LENGTH]}..."
    return text


def deliver_message_notification(
    recipient_id: UUID,
    sender_id: UUID,
    sender_name: str,
    conversation_id: UUID,
    text: str,
) -> Optional[Notification]:
    """Background task run after a message is stored. Uses its own session."""
    db = database.SessionLocal()
    try:
        return create_notification(
            db,
            recipient_id,
            NotificationType.MESSAGE,
            "New message",
            f"{sender_name or 'Someone'} sent you a message: {message_preview(text)}",
            related_user_id=sender_id,
            related_conversation_id=conversation_id,
        )
    finally:
        db.close()


def count_unread(db: Session, user_id: UUID) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).count()


def list_notifications(
    db: Session, user_id: UUID, unread_only: bool = False, limit: int = DEFAULT_LIMIT
) -> Tuple[List[Notification], int]:
    """Newest first, plus the current unread count."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    notifications = query.order_by(Notification.created_at.desc()).limit(limit).all()
    return notifications, count_unread(db, user_id)


def _get_owned(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> Notification:
    notification = _get_owned(db, notification_id, user_id)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Flip every unread notification of the user in one statement; returns rows touched."""
    modified = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read.is_(False),
    ).update(
        {Notification.is_read: True, Notification.read_at: utcnow()},
        synchronize_session=False,
    )
    db.commit()
    return modified


def delete_notification(db: Session, notification_id: UUID, user_id: UUID) -> None:
    notification = _get_owned(db, notification_id, user_id)
    db.delete(notification)
    db.commit()
