"""Object Storage Port - Domain interface for S3-compatible storage.

This port defines the contract for storing, signing and removing onboarding
document bytes. Adapters implement it for S3, MinIO, or an in-memory fake.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised by adapters when the object store fails or is unreachable."""
    pass


class ObjectStoragePort(ABC):
    """Port interface for S3-compatible object storage operations.

    Keys are computed by the caller (see ``build_storage_key``); the adapter
    never invents them. Clients normally upload and download bytes directly
    against presigned URLs, so the application server rarely sees file content.

    Example Usage:
        storage = S3StorageAdapter(...)

        url = await storage.generate_presigned_upload_url(
            'documents/<user_id>/PAN_CARD_1735689600000_pan.pdf',
            content_type='application/pdf',
        )
    """

    @abstractmethod
    async def store_file(self, storage_key: str, content: bytes, content_type: str) -> None:
        """Upload bytes under the given key, overwriting any existing object.

        Raises:
            StorageError: If upload fails or storage is unavailable
        """
        pass

    @abstractmethod
    async def delete_file(self, storage_key: str) -> bool:
        """Delete an object.

        Returns:
            bool: True if the object was deleted, False if it didn't exist

        Raises:
            StorageError: If deletion fails

        Note:
            This operation is idempotent (deleting a missing object returns False).
        """
        pass

    @abstractmethod
    async def file_exists(self, storage_key: str) -> bool:
        """Check if an object exists (HEAD request only)."""
        pass

    @abstractmethod
    async def generate_presigned_url(
        self,
        storage_key: str,
        expires_in_seconds: int = 3600,
    ) -> str:
        """Generate a time-limited GET URL for direct download.

        Raises:
            StorageError: If URL generation fails
        """
        pass

    @abstractmethod
    async def generate_presigned_upload_url(
        self,
        storage_key: str,
        content_type: str,
        expires_in_seconds: int = 3600,
    ) -> str:
        """Generate a time-limited PUT URL the client uploads the bytes to.

        The content type is part of the signature, so the client must send the
        same Content-Type header it declared when initiating the upload.

        Raises:
            StorageError: If URL generation fails
        """
        pass
