"""Document SQLAlchemy model

Document represents one onboarding document a user submitted for review.
Bytes live in object storage under ``storage_key``; the row tracks metadata
and the review outcome.
"""

from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType

from .base import Base, utcnow


class Document(Base):
    """Document model representing an uploaded onboarding document.

    At most one row exists per (user_id, type). A re-upload deletes the old
    row and inserts a new PENDING one in the same transaction.
    """
    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_document_user_type"),
        Index("ix_document_status", "status"),
        Index("ix_document_uploaded_at", "uploaded_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = Column(SQLEnum(DocumentType, name="documenttype", native_enum=False, length=32), nullable=False)
    file_name = Column(Text, nullable=False)
    file_size = Column(BigInteger, nullable=False)
    file_type = Column(Text, nullable=False)  # MIME type declared by the client
    storage_key = Column(Text, nullable=False)
    status = Column(
        SQLEnum(DocumentStatus, name="documentstatus", native_enum=False, length=16),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    reviewed_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)  # rejection reason, NULL unless REJECTED
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", foreign_keys=[user_id], back_populates="documents")
    reviewer = relationship("User", foreign_keys=[reviewed_by])

