"""S3 Storage Adapter - Implementation of ObjectStoragePort using boto3.

Provides S3-compatible storage operations for AWS S3, MinIO, and other
S3-compatible services: server-side puts, deletes, existence checks and
presigned GET/PUT URLs.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from io import BytesIO
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError

from domain.documents.ports.object_storage_port import ObjectStoragePort, StorageError
from observability.metrics import storage_latency_seconds

logger = logging.getLogger(__name__)


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    Example:
        config = load_storage_config()
        storage = S3StorageAdapter(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
        )

        url = await storage.generate_presigned_upload_url(key, 'application/pdf')
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        """Initialize S3 storage adapter.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            self.bucket_name = bucket_name
            self.region = region

            logger.info(
                f"Initialized S3 storage adapter: bucket={bucket_name}, "
                f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

    async def store_file(self, storage_key: str, content: bytes, content_type: str) -> None:
        """Upload bytes under storage_key.

        Raises:
            StorageError: If upload fails
            ValueError: If content is empty
        """
        if not content:
            raise ValueError("Cannot store empty file")

        try:
            with storage_latency_seconds.labels(operation="put").time():
                self.s3_client.put_object(
                    Bucket=self.bucket_name,
                    Key=storage_key,
                    Body=BytesIO(content),
                    ContentType=content_type,
                )
            logger.info(
                f"Uploaded file: storage_key={storage_key}, "
                f"size={len(content)}, content_type={content_type}"
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 upload failed: storage_key={storage_key}, "
                f"error={error_code}, message={e}"
            )
            raise StorageError(f"Failed to upload file: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during upload: {e}")
            raise StorageError(f"Failed to upload file: {e}")

    async def delete_file(self, storage_key: str) -> bool:
        """Delete an object from S3.

        Returns:
            bool: True if deleted, False if it didn't exist

        Raises:
            StorageError: If deletion fails
        """
        try:
            if not await self.file_exists(storage_key):
                logger.info(f"File not found for deletion: storage_key={storage_key}")
                return False

            with storage_latency_seconds.labels(operation="delete").time():
                self.s3_client.delete_object(
                    Bucket=self.bucket_name,
                    Key=storage_key,
                )

            logger.info(f"Deleted file: storage_key={storage_key}")
            return True

        except StorageError:
            raise
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 deletion failed: storage_key={storage_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to delete file: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during deletion: {e}")
            raise StorageError(f"Failed to delete file: {e}")

    async def file_exists(self, storage_key: str) -> bool:
        """Check if an object exists in S3 (HEAD request).

        Raises:
            StorageError: If S3 answers with anything but found / not found
        """
        try:
            with storage_latency_seconds.labels(operation="head").time():
                self.s3_client.head_object(
                    Bucket=self.bucket_name,
                    Key=storage_key,
                )
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey", "NotFound"):
                return False
            logger.warning(
                f"Error checking file existence: storage_key={storage_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to check file existence: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error checking file existence: {e}")
            raise StorageError(f"Failed to check file existence: {e}")

    async def generate_presigned_url(
        self,
        storage_key: str,
        expires_in_seconds: int = 3600,
    ) -> str:
        """Generate a presigned URL for direct download.

        Signing is local: no request reaches S3, so a missing object only
        surfaces when the client follows the URL.
        """
        return self._presign(
            "get_object",
            {"Bucket": self.bucket_name, "Key": storage_key},
            expires_in_seconds,
        )

    async def generate_presigned_upload_url(
        self,
        storage_key: str,
        content_type: str,
        expires_in_seconds: int = 3600,
    ) -> str:
        """Generate a presigned URL the client PUTs the file bytes to."""
        return self._presign(
            "put_object",
            {"Bucket": self.bucket_name, "Key": storage_key, "ContentType": content_type},
            expires_in_seconds,
        )

    def _presign(self, operation: str, params: dict, expires_in_seconds: int) -> str:
        try:
            url = self.s3_client.generate_presigned_url(
                operation,
                Params=params,
                ExpiresIn=expires_in_seconds,
            )
            logger.info(
                f"Generated presigned URL: operation={operation}, "
                f"storage_key={params['Key']}, expires_in={expires_in_seconds}s"
            )
            return url
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"Presigned URL generation failed: storage_key={params['Key']}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to generate presigned URL: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error generating presigned URL: {e}")
            raise StorageError(f"Failed to generate presigned URL: {e}")

    async def verify_bucket_exists(self) -> bool:
        """Verify that the configured bucket exists.

        Used by the readiness probe.

        Raises:
            StorageError: If bucket check fails or bucket doesn't exist
        """
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "404":
                raise StorageError(
                    f"Bucket '{self.bucket_name}' does not exist. "
                    f"Create it first or update S3_BUCKET_NAME."
                )
            raise StorageError(f"Failed to verify bucket: {error_code}")
        except Exception as e:
            raise StorageError(f"Failed to verify bucket: {e}")
