"""SQLAlchemy Models for the onboarding service"""

from .base import Base
from .user import User, OnboardingStatus, BloodGroup
from .document import Document, DocumentStatus, DocumentType
from .notification import Notification

__all__ = [
    "Base",
    "User",
    "OnboardingStatus",
    "BloodGroup",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "Notification",
]
