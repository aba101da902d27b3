"""Notifier Port - delivery of in-app notifications and emails.

Callers treat every method as fallible and best-effort: a raised exception is
logged and counted by the lifecycle service, never propagated to the client.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from domain.notifications.notification_type import NotificationType


class NotifierPort(ABC):

    @abstractmethod
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
        """Create an in-app notification for a user."""

    @abstractmethod
    def send_email(self, to: str, subject: str, html: str) -> None:
        """Hand an email to the delivery channel."""
