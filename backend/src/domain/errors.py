"""Domain error taxonomy.

Every expected failure of a lifecycle operation is raised as one of these.
The API layer maps them to HTTP responses in one place (see main.py), so
service code never builds HTTPException itself.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for expected, caller-recoverable failures."""

    status_code: int = 500
    code: str = "domain_error"

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class UnauthenticatedError(DomainError):
    """No valid caller identity."""
    status_code = 401
    code = "unauthenticated"


class ForbiddenError(DomainError):
    """Caller is known but lacks the role or ownership required."""
    status_code = 403
    code = "forbidden"


class ValidationError(DomainError):
    """Malformed or missing input (blank rejection notes, bad type, oversized file)."""
    status_code = 400
    code = "validation_error"


class NotFoundError(DomainError):
    """Referenced document, user or notification does not exist."""
    status_code = 404
    code = "not_found"


class ConflictError(DomainError):
    """Request conflicts with the current state (e.g. reviewing a reviewed document)."""
    status_code = 409
    code = "conflict"


class DependencyFailureError(DomainError):
    """Object storage or another backing service failed unexpectedly."""
    status_code = 502
    code = "dependency_failure"
