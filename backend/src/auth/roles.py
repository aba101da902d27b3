"""User roles and permission hierarchy for the onboarding app.

Role Hierarchy (descending permissions):
- ADMIN: Reviews documents, manages users and onboarding status
- USER: New joiner uploading their own documents

Permission Matrix:
┌──────────────────────────┬───────┬──────┐
│ Action                   │ ADMIN │ USER │
├──────────────────────────┼───────┼──────┤
│ Upload own documents     │   ✓   │  ✓   │
│ View/delete own document │   ✓   │  ✓   │
│ View/delete any document │   ✓   │      │
│ Review documents         │   ✓   │      │
│ Manage users             │   ✓   │      │
└──────────────────────────┴───────┴──────┘
"""

from enum import Enum
from typing import Dict, Set


class UserRole(str, Enum):
    """User roles.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMIN = "ADMIN"
    USER = "USER"


# Role hierarchy: Each role includes permissions of all roles below it
ROLE_HIERARCHY: Dict[UserRole, Set[UserRole]] = {
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.USER},
    UserRole.USER: {UserRole.USER},
}


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """Check if a user role has permission to perform an action requiring a specific role.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.USER)
        True
        >>> has_permission(UserRole.USER, UserRole.ADMIN)
        False
    """
    return required_role in ROLE_HIERARCHY.get(user_role, set())


def is_admin(user) -> bool:
    """True if the persisted user row carries the ADMIN role."""
    try:
        return UserRole(user.role) == UserRole.ADMIN
    except ValueError:
        return False
