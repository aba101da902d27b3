"""Document Repository Port - persistence contract for onboarding documents.

Both backings (SQLAlchemy and in-memory) honour the same rules:
- at most one document per (user_id, type)
- ``replace_for_user_and_type`` removes the old rows and inserts the new one
  atomically, raising ConflictError when a concurrent writer won the race
- every mutating call is committed before it returns
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType


class DocumentRepository(ABC):
    """Port interface for document persistence."""

    @abstractmethod
    def get(self, document_id: UUID):
        """Return the document or None."""

    @abstractmethod
    def get_for_update(self, document_id: UUID):
        """Return the latest committed state of the document, or None.

        The row stays locked against other writers until the next mutating
        call commits, so a status check made on the result still holds when
        the change is written.
        """

    @abstractmethod
    def find_by_user_and_type(self, user_id: UUID, document_type: DocumentType):
        """Return the current document of this type for the user, or None."""

    @abstractmethod
    def list_for_user(self, user_id: UUID) -> List:
        """All documents of a user, newest upload first."""

    @abstractmethod
    def list_all(
        self,
        status: Optional[DocumentStatus] = None,
        user_id: Optional[UUID] = None,
        document_type: Optional[DocumentType] = None,
    ) -> List:
        """All documents matching the optional filters, newest upload first."""

    @abstractmethod
    def count_by_status(self, user_id: Optional[UUID] = None) -> Dict[DocumentStatus, int]:
        """Document counts keyed by every status (zero-filled)."""

    @abstractmethod
    def create(self, document):
        """Insert a document.

        Raises:
            ConflictError: If a document of the same type already exists for the user
        """

    @abstractmethod
    def update(self, document):
        """Persist changes made to a loaded document."""

    @abstractmethod
    def delete(self, document) -> None:
        """Remove a document row."""

    @abstractmethod
    def replace_for_user_and_type(self, document) -> List[str]:
        """Atomically supersede existing rows of (document.user_id, document.type).

        Returns:
            Storage keys of the superseded rows, so the caller can delete
            their objects after the swap has been committed.

        Raises:
            ConflictError: If a concurrent upload inserted a row first
        """
