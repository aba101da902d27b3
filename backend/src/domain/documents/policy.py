"""Authorization policy for document operations

Every document endpoint and the lifecycle service consult these functions,
so the rules live in exactly one place. The caller's role is always the one
stored on the persisted User row, never a claim from the token.

    ┌──────────────┬───────┬──────────────┐
    │ Operation    │ Owner │ ADMIN        │
    ├──────────────┼───────┼──────────────┤
    │ get/download │   ✓   │      ✓       │
    │ upload       │   ✓   │ own docs only│
    │ delete       │   ✓   │      ✓       │
    │ review       │       │      ✓       │
    │ list all     │       │      ✓       │
    └──────────────┴───────┴──────────────┘
"""

from uuid import UUID

from auth.roles import is_admin
from domain.errors import ForbiddenError


def _is_owner(caller, document) -> bool:
    return caller.id == document.user_id


def can_access(caller, document) -> bool:
    return _is_owner(caller, document) or is_admin(caller)


def can_upload(caller, owner_id: UUID) -> bool:
    return caller.id == owner_id


def can_delete(caller, document) -> bool:
    return _is_owner(caller, document) or is_admin(caller)


def can_review(caller) -> bool:
    return is_admin(caller)


def ensure_can_access(caller, document) -> None:
    if not can_access(caller, document):
        raise ForbiddenError("You do not have access to this document")


def ensure_can_upload(caller, owner_id: UUID) -> None:
    if not can_upload(caller, owner_id):
        raise ForbiddenError("Documents can only be uploaded by their owner")


def ensure_can_delete(caller, document) -> None:
    if not can_delete(caller, document):
        raise ForbiddenError("You do not have permission to delete this document")


def ensure_can_review(caller) -> None:
    if not can_review(caller):
        raise ForbiddenError("Only admins can review documents")


def can_list_all(caller) -> bool:
    return is_admin(caller)


def ensure_can_list_all(caller) -> None:
    if not can_list_all(caller):
        raise ForbiddenError("Only admins can list every user's documents")
