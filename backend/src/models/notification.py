"""Notification SQLAlchemy model

In-app notifications raised by document transitions. Deleting the document
keeps the notification and nulls ``document_id``.
"""

from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Text, Uuid

from .base import Base, utcnow


class Notification(Base):
    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_created", "user_id", "created_at"),
        CheckConstraint(
            "type IN ('document_uploaded', 'document_approved', 'document_rejected')",
            name="ck_notification_type",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    document_id = Column(Uuid, ForeignKey("document.id", ondelete="SET NULL"), nullable=True)
    document_type = Column(Text, nullable=True)
    related_link = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

