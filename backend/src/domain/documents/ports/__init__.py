"""Document Port Interfaces"""

from .document_repository_port import DocumentRepository
from .object_storage_port import ObjectStoragePort, StorageError

__all__ = ["DocumentRepository", "ObjectStoragePort", "StorageError"]
