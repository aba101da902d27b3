"""Admin dashboard aggregates.

Only the numbers are computed here; charts and layout belong to the web app.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from auth.roles import UserRole
from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType
from models.document import Document
from models.user import OnboardingStatus, User

NEW_USER_WINDOW = timedelta(days=7)
RECENT_ACTIVITY_LIMIT = 10
RECENT_USERS_LIMIT = 5


def approval_rate(approved: int, total: int) -> int:
    """Whole-number percentage of documents approved (0 when there are none).

    Example:
        >>> approval_rate(1, 3)
        33
        >>> approval_rate(0, 0)
        0
    """
    return round(approved / total * 100) if total else 0


def build_dashboard(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    is_onboarding_user = User.role == UserRole.USER.value

    total_users = db.execute(select(func.count(User.id)).where(is_onboarding_user)).scalar_one()
    new_users = db.execute(
        select(func.count(User.id)).where(is_onboarding_user, User.created_at >= now - NEW_USER_WINDOW)
    ).scalar_one()
    incomplete = db.execute(
        select(func.count(User.id)).where(
            is_onboarding_user,
            User.onboarding_status != OnboardingStatus.COMPLETED.value,
        )
    ).scalar_one()

    by_status = {status: 0 for status in DocumentStatus}
    for status, count in db.execute(
        select(Document.status, func.count(Document.id)).group_by(Document.status)
    ):
        by_status[DocumentStatus(status)] = count
    total_documents = sum(by_status.values())

    by_type = {doc_type: 0 for doc_type in DocumentType}
    for doc_type, count in db.execute(
        select(Document.type, func.count(Document.id)).group_by(Document.type)
    ):
        by_type[DocumentType(doc_type)] = count

    owner = aliased(User)
    reviewer = aliased(User)
    recent_rows = db.execute(
        select(Document, owner.name, owner.email, reviewer.name)
        .join(owner, Document.user_id == owner.id)
        .outerjoin(reviewer, Document.reviewed_by == reviewer.id)
        .order_by(Document.uploaded_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).all()

    recent_users = db.execute(
        select(User).where(is_onboarding_user).order_by(User.created_at.desc()).limit(RECENT_USERS_LIMIT)
    ).scalars().all()

    return {
        "user_stats": {
            "total_users": total_users,
            "new_users_this_week": new_users,
            "incomplete_onboarding": incomplete,
        },
        "document_stats": {
            "total": total_documents,
            "pending": by_status[DocumentStatus.PENDING],
            "approved": by_status[DocumentStatus.APPROVED],
            "rejected": by_status[DocumentStatus.REJECTED],
        },
        "approval_rate": approval_rate(by_status[DocumentStatus.APPROVED], total_documents),
        "pending_review": by_status[DocumentStatus.PENDING],
        "documents_by_type": [
            {"type": doc_type, "count": count} for doc_type, count in by_type.items()
        ],
        "recent_document_activity": [
            {
                "document": document,
                "user_name": user_name,
                "user_email": user_email,
                "reviewer_name": reviewer_name,
            }
            for document, user_name, user_email, reviewer_name in recent_rows
        ],
        "recent_users": recent_users,
    }
