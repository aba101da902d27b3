"""Notifier implementation: in-app rows plus queued email."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from domain.notifications.notification_type import NotificationType
from domain.notifications.ports.notifier_port import NotifierPort
from notifications.service import create_notification
from notifications.tasks import send_email as send_email_task
from workers.base import request_id_headers

logger = logging.getLogger(__name__)


class NotificationDispatcher(NotifierPort):
    """Writes notifications with the request's session and enqueues email.

    Called only after the document transition has been committed, so a
    rollback here never touches the transition itself.
    """

    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: NotificationType,
        document_id: Optional[UUID] = None,
        document_type: Optional[str] = None,
        link: Optional[str] = None,
    ) -> None:
        try:
            create_notification(
                self.db,
                user_id=user_id,
                title=title,
                message=message,
                notification_type=notification_type,
                document_id=document_id,
                document_type=document_type,
                related_link=link,
            )
        except Exception:
            self.db.rollback()
            raise

    def send_email(self, to: str, subject: str, html: str) -> None:
        send_email_task.apply_async(
            kwargs={"to": to, "subject": subject, "html": html},
            headers=request_id_headers(),
        )
        logger.info(f"Queued email: to={to}, subject={subject}")
