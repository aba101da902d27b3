"""User SQLAlchemy model"""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Text, CheckConstraint, Uuid
from sqlalchemy.orm import relationship, validates
import enum
import re

from .base import Base, utcnow


class OnboardingStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class BloodGroup(str, enum.Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class User(Base):
    """User model representing a new joiner or an admin.

    Rows are provisioned on first sign-in from the identity provider's
    verified email. There is no password: authentication is delegated.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=True)
    role = Column(Text, nullable=False, default="USER")
    onboarding_status = Column(Text, nullable=False, default=OnboardingStatus.IN_PROGRESS.value)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    blood_group = Column(Text, nullable=True)
    linkedin_profile = Column(Text, nullable=True)
    slack_user_id = Column(Text, nullable=True)
    team_bio = Column(Text, nullable=True)
    team_image_key = Column(Text, nullable=True)
    tour_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    documents = relationship(
        "Document",
        foreign_keys="Document.user_id",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'USER')", name='ck_user_role'),
        CheckConstraint(
            "onboarding_status IN ('IN_PROGRESS', 'COMPLETED')",
            name='ck_user_onboarding_status'
        ),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

    def to_dict(self):
        """Convert user to dictionary representation"""
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "onboarding_status": self.onboarding_status,
            "phone": self.phone,
            "address": self.address,
            "blood_group": self.blood_group,
            "linkedin_profile": self.linkedin_profile,
            "slack_user_id": self.slack_user_id,
            "team_bio": self.team_bio,
            "tour_completed": self.tour_completed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
