"""Notification Port Interfaces"""

from .notifier_port import NotifierPort
from .user_directory_port import UserDirectoryPort

__all__ = ["NotifierPort", "UserDirectoryPort"]
