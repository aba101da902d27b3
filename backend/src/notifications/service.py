"""In-app notification persistence and feed operations.

A notification is only visible to its recipient. Requests for someone
else's notification get NotFoundError, so ids cannot be probed.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from domain.errors import NotFoundError
from domain.notifications.notification_type import NotificationType
from models.base import utcnow
from models.notification import Notification

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: UUID,
    title: str,
    message: str,
    notification_type: NotificationType,
    document_id: Optional[UUID] = None,
    document_type: Optional[str] = None,
    related_link: Optional[str] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=NotificationType(notification_type).value,
        document_id=document_id,
        document_type=document_type,
        related_link=related_link,
        is_read=False,
    )
    db.add(notification)
    db.commit()
    return notification


def list_notifications(db: Session, user_id: UUID) -> Tuple[List[Notification], int, int]:
    """Return (notifications newest first, unread_count, total_count)."""
    notifications = list(db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
    ).scalars())
    unread_count = db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    ).scalar_one()
    return notifications, unread_count, len(notifications)


def _get_owned(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    return notification


def mark_read(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    notification = _get_owned(db, user_id, notification_id)
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark every unread notification of the user as read, returning how many changed."""
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True, updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    logger.info(f"Marked {result.rowcount} notification(s) read: user_id={user_id}")
    return result.rowcount


def delete_notification(db: Session, user_id: UUID, notification_id: UUID) -> None:
    notification = _get_owned(db, user_id, notification_id)
    db.delete(notification)
    db.commit()
