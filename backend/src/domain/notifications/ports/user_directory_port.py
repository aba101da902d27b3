"""User Directory Port - lookups the lifecycle service needs for side effects"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID


class UserDirectoryPort(ABC):

    @abstractmethod
    def get_user(self, user_id: UUID) -> Optional[object]:
        """Return the user (with ``id``, ``email``, ``name``, ``role``) or None."""

    @abstractmethod
    def list_admins(self) -> List:
        """All users holding the ADMIN role."""
