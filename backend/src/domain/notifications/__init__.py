"""Notifications domain module - notification kinds and delivery ports"""

from .notification_type import NotificationType

__all__ = ["NotificationType"]
