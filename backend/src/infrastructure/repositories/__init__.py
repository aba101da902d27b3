"""Repository implementations"""

from .document_repository import InMemoryDocumentRepository, SqlAlchemyDocumentRepository

__all__ = ["InMemoryDocumentRepository", "SqlAlchemyDocumentRepository"]
