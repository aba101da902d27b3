"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Verifying the identity provider's bearer token
- Loading (or provisioning) the current user
- Enforcing role-based access control

Usage:
    @app.get("/protected")
    def protected_endpoint(user: User = Depends(get_current_user)):
        return {"message": f"Hello {user.name}"}

    @app.get("/admin-only")
    def admin_endpoint(user: User = Depends(require_role(UserRole.ADMIN))):
        return {"message": "Admin access granted"}
"""

import logging
from typing import Annotated, Callable, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import get_db
from domain.errors import ForbiddenError, UnauthenticatedError
from models.user import User
from users.service import get_or_provision_user
from .jwt import decode_token
from .roles import UserRole, has_permission

logger = logging.getLogger(__name__)

# Missing credentials are reported as 401 by get_current_user itself
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Verify the bearer token and return the persisted user.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Validates token signature and expiration
    3. Loads the user by verified email, creating it on first sign-in
    4. Returns the User row (role comes from the row, not the token)

    Raises:
        UnauthenticatedError: If token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise UnauthenticatedError(str(e))

    try:
        return get_or_provision_user(db, email=payload["email"], name=payload.get("name"))
    except ValueError as e:
        # Email claim present but malformed
        raise UnauthenticatedError(f"Invalid token claims: {e}")


def require_role(required_role: UserRole) -> Callable:
    """Create a dependency that enforces role-based access control.

    Example:
        @app.get("/admin/users")
        def list_users(admin: User = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            user_role = UserRole(current_user.role)
        except ValueError:
            logger.error(f"Invalid role on user row: user_id={current_user.id}, role={current_user.role}")
            raise ForbiddenError("Insufficient permissions")

        if not has_permission(user_role, required_role):
            raise ForbiddenError(f"Insufficient permissions. Required role: {required_role.value}")

        return current_user

    return role_dependency


def get_current_admin(current_user: User = Depends(require_role(UserRole.ADMIN))) -> User:
    """Convenience dependency for ADMIN-only endpoints."""
    return current_user


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[User, Depends(get_current_admin)]
