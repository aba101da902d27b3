"""DocumentStatus state machine for the onboarding document review lifecycle

State flow:
    (absent) → PENDING → APPROVED or REJECTED

A document never returns to PENDING in place. A fresh upload of the same type
supersedes the old row with a new PENDING one.
"""

from enum import Enum
from typing import Optional, Dict, List


class DocumentStatus(str, Enum):
    """Document review status enum"""
    PENDING = "PENDING"      # Uploaded, waiting for an admin
    APPROVED = "APPROVED"    # Accepted by an admin (terminal)
    REJECTED = "REJECTED"    # Refused by an admin, owner must re-upload (terminal)


# Statuses an admin may choose when reviewing
REVIEW_DECISIONS = (DocumentStatus.APPROVED, DocumentStatus.REJECTED)

# State transition rules
ALLOWED_TRANSITIONS: Dict[Optional[DocumentStatus], List[DocumentStatus]] = {
    None: [DocumentStatus.PENDING],
    DocumentStatus.PENDING: [DocumentStatus.APPROVED, DocumentStatus.REJECTED],
    DocumentStatus.APPROVED: [],  # Only superseded by a new upload
    DocumentStatus.REJECTED: [],  # Only superseded by a new upload
}


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def can_transition(from_status: Optional[DocumentStatus], to_status: DocumentStatus) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status (None for new documents)
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(DocumentStatus.PENDING, DocumentStatus.APPROVED)
        True
        >>> can_transition(DocumentStatus.APPROVED, DocumentStatus.REJECTED)
        False
    """
    allowed = ALLOWED_TRANSITIONS.get(from_status, [])
    return to_status in allowed


def validate_transition(from_status: Optional[DocumentStatus], to_status: DocumentStatus) -> None:
    """Raise StateTransitionError unless the transition is allowed

    Args:
        from_status: Current status (None for new documents)
        to_status: Target status

    Raises:
        StateTransitionError: If transition is not allowed
    """
    if not can_transition(from_status, to_status):
        current = from_status.value if from_status else "NEW"
        allowed = [s.value for s in get_allowed_transitions(from_status)]
        raise StateTransitionError(
            f"Invalid transition: {current} -> {to_status.value}. "
            f"Allowed transitions from {current}: {allowed}"
        )


def get_allowed_transitions(from_status: Optional[DocumentStatus]) -> List[DocumentStatus]:
    """Get list of allowed transitions from current status

    Example:
        >>> get_allowed_transitions(DocumentStatus.PENDING)
        [DocumentStatus.APPROVED, DocumentStatus.REJECTED]
    """
    return ALLOWED_TRANSITIONS.get(from_status, [])
