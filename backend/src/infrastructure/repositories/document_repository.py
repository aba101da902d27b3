"""Document repository backings

Two implementations of the DocumentRepository port. Call sites receive one of
them through dependency injection and never branch on which is active.
"""

import logging
import threading
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType
from domain.documents.ports.document_repository_port import DocumentRepository
from domain.errors import ConflictError
from models.document import Document

logger = logging.getLogger(__name__)


def _zero_counts() -> Dict[DocumentStatus, int]:
    return {status: 0 for status in DocumentStatus}


class SqlAlchemyDocumentRepository(DocumentRepository):
    """Relational backing.

    Each mutating call commits the session it was given, so a successful
    return means the change is durable.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, document_id: UUID) -> Optional[Document]:
        return self.db.get(Document, document_id)

    def get_for_update(self, document_id: UUID) -> Optional[Document]:
        # populate_existing replaces whatever this session loaded earlier
        return self.db.execute(
            select(Document)
            .where(Document.id == document_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def find_by_user_and_type(self, user_id: UUID, document_type: DocumentType) -> Optional[Document]:
        return self.db.execute(
            select(Document).where(
                Document.user_id == user_id,
                Document.type == DocumentType(document_type),
            )
        ).scalar_one_or_none()

    def list_for_user(self, user_id: UUID) -> List[Document]:
        return list(self.db.execute(
            select(Document)
            .where(Document.user_id == user_id)
            .order_by(Document.uploaded_at.desc())
        ).scalars())

    def list_all(
        self,
        status: Optional[DocumentStatus] = None,
        user_id: Optional[UUID] = None,
        document_type: Optional[DocumentType] = None,
    ) -> List[Document]:
        query = select(Document)
        if status is not None:
            query = query.where(Document.status == DocumentStatus(status))
        if user_id is not None:
            query = query.where(Document.user_id == user_id)
        if document_type is not None:
            query = query.where(Document.type == DocumentType(document_type))
        return list(self.db.execute(query.order_by(Document.uploaded_at.desc())).scalars())

    def count_by_status(self, user_id: Optional[UUID] = None) -> Dict[DocumentStatus, int]:
        query = select(Document.status, func.count(Document.id)).group_by(Document.status)
        if user_id is not None:
            query = query.where(Document.user_id == user_id)
        counts = _zero_counts()
        for status, count in self.db.execute(query):
            counts[DocumentStatus(status)] = count
        return counts

    def create(self, document: Document) -> Document:
        self.db.add(document)
        self._commit(document)
        return document

    def update(self, document: Document) -> Document:
        self._commit(document)
        return document

    def delete(self, document: Document) -> None:
        self.db.delete(document)
        self.db.commit()

    def replace_for_user_and_type(self, document: Document) -> List[str]:
        """Delete existing rows of the same (user, type) and insert document.

        Runs in a single transaction. Existing rows are locked (SELECT ... FOR
        UPDATE) so a concurrent replace waits; a concurrent first upload that
        slips past the lock is stopped by uq_document_user_type.
        """
        existing = list(self.db.execute(
            select(Document)
            .where(
                Document.user_id == document.user_id,
                Document.type == DocumentType(document.type),
            )
            .with_for_update()
        ).scalars())
        superseded_keys = [old.storage_key for old in existing]

        for old in existing:
            self.db.delete(old)
        # Deletes must reach the database before the insert hits the unique constraint
        self.db.flush()

        self.db.add(document)
        self._commit(document)

        if superseded_keys:
            logger.info(
                f"Superseded {len(superseded_keys)} document(s): user_id={document.user_id}, "
                f"type={DocumentType(document.type).value}, new_document_id={document.id}"
            )
        return superseded_keys

    def _commit(self, document: Document) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"Document write lost a race: user_id={document.user_id}, "
                f"type={document.type}, error={e.orig}"
            )
            raise ConflictError(
                "Another upload of this document type is in progress, please retry"
            )


class InMemoryDocumentRepository(DocumentRepository):
    """Process-local backing for tests and local development.

    A single mutex serializes writers, giving the same at-most-one-row
    guarantee the unique constraint gives the relational backing.
    """

    def __init__(self):
        self._documents: Dict[UUID, Document] = {}
        self._lock = threading.Lock()

    def get(self, document_id: UUID) -> Optional[Document]:
        return self._documents.get(document_id)

    def get_for_update(self, document_id: UUID) -> Optional[Document]:
        # Rows are shared objects, so there is no stale copy to refresh
        return self._documents.get(document_id)

    def find_by_user_and_type(self, user_id: UUID, document_type: DocumentType) -> Optional[Document]:
        for document in self._documents.values():
            if document.user_id == user_id and document.type == DocumentType(document_type):
                return document
        return None

    def list_for_user(self, user_id: UUID) -> List[Document]:
        return self.list_all(user_id=user_id)

    def list_all(
        self,
        status: Optional[DocumentStatus] = None,
        user_id: Optional[UUID] = None,
        document_type: Optional[DocumentType] = None,
    ) -> List[Document]:
        documents = [
            d for d in self._documents.values()
            if (status is None or d.status == status)
            and (user_id is None or d.user_id == user_id)
            and (document_type is None or d.type == document_type)
        ]
        return sorted(documents, key=lambda d: d.uploaded_at, reverse=True)

    def count_by_status(self, user_id: Optional[UUID] = None) -> Dict[DocumentStatus, int]:
        counts = _zero_counts()
        for document in self.list_all(user_id=user_id):
            counts[DocumentStatus(document.status)] += 1
        return counts

    def create(self, document: Document) -> Document:
        with self._lock:
            if self.find_by_user_and_type(document.user_id, document.type) is not None:
                raise ConflictError("A document of this type already exists")
            self._documents[document.id] = document
        return document

    def update(self, document: Document) -> Document:
        with self._lock:
            self._documents[document.id] = document
        return document

    def delete(self, document: Document) -> None:
        with self._lock:
            self._documents.pop(document.id, None)

    def replace_for_user_and_type(self, document: Document) -> List[str]:
        with self._lock:
            existing = [
                d for d in self._documents.values()
                if d.user_id == document.user_id and d.type == DocumentType(document.type)
            ]
            for old in existing:
                del self._documents[old.id]
            self._documents[document.id] = document
        return [old.storage_key for old in existing]
