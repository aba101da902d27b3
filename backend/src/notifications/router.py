"""Notification feed endpoints.

Every route is scoped to the caller. Someone else's notification id answers
404, the same as an id that does not exist.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from auth.dependencies import CurrentUser
from database import get_db
from notifications import service
from notifications.schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
def list_notifications(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> NotificationListResponse:
    notifications, unread_count, total_count = service.list_notifications(db, current_user.id)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread_count,
        total_count=total_count,
    )


# Registered before /{notification_id} so "read-all" is not parsed as an id
@router.patch("/read-all", response_model=MarkAllReadResponse, summary="Mark all as read")
def mark_all_read(
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=service.mark_all_read(db, current_user.id))


@router.patch("/{notification_id}", response_model=NotificationResponse, summary="Mark as read")
def mark_read(
    notification_id: UUID,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> NotificationResponse:
    notification = service.mark_read(db, current_user.id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
)
def delete_notification(
    notification_id: UUID,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> None:
    service.delete_notification(db, current_user.id, notification_id)
