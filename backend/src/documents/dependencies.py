"""FastAPI wiring for the document lifecycle service.

Tests swap the storage adapter and notifier through
app.dependency_overrides[get_storage] / [get_notifier].
"""

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from domain.documents.ports.document_repository_port import DocumentRepository
from domain.documents.ports.object_storage_port import ObjectStoragePort
from domain.notifications.ports.notifier_port import NotifierPort
from documents.service import DocumentLifecycleService
from infrastructure.repositories.document_repository import SqlAlchemyDocumentRepository
from infrastructure.storage.s3_storage_adapter import S3StorageAdapter
from infrastructure.storage.storage_config import load_storage_config
from notifications.dispatcher import NotificationDispatcher
from users.service import SqlAlchemyUserDirectory

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage() -> ObjectStoragePort:
    """Storage adapter singleton (boto3 clients are thread-safe)."""
    config = load_storage_config()
    return S3StorageAdapter(
        endpoint_url=config.endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        bucket_name=config.bucket_name,
        region=config.region,
    )


def get_document_repository(db: Session = Depends(get_db)) -> DocumentRepository:
    return SqlAlchemyDocumentRepository(db)


def get_notifier(db: Session = Depends(get_db)) -> NotifierPort:
    return NotificationDispatcher(db)


def get_lifecycle_service(
    db: Session = Depends(get_db),
    repository: DocumentRepository = Depends(get_document_repository),
    storage: ObjectStoragePort = Depends(get_storage),
    notifier: NotifierPort = Depends(get_notifier),
) -> DocumentLifecycleService:
    return DocumentLifecycleService(
        repository=repository,
        storage=storage,
        notifier=notifier,
        users=SqlAlchemyUserDirectory(db),
    )
