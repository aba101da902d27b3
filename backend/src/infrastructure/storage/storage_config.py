"""Object storage configuration.

Collects the S3 settings the document service needs into one validated
object, so a bad deployment fails at startup instead of on the first upload.
Works against MinIO in development and AWS S3 in production.
"""

from dataclasses import dataclass
from typing import Optional

from config import Settings, get_settings

# SigV4 presigned URLs cannot outlive seven days
MAX_PRESIGN_TTL_SECONDS = 7 * 24 * 3600


@dataclass
class StorageConfig:
    """Settings for the documents bucket.

    Attributes:
        endpoint_url: Custom endpoint (MinIO, LocalStack). None for AWS S3
        access_key: Access key ID
        secret_key: Secret access key
        bucket_name: Bucket holding every uploaded document
        region: Bucket region
        upload_url_ttl: Lifetime of presigned PUT URLs, in seconds
        download_url_ttl: Lifetime of presigned GET URLs, in seconds
    """
    endpoint_url: Optional[str]
    access_key: str
    secret_key: str
    bucket_name: str
    region: str = "us-east-1"
    upload_url_ttl: int = 3600
    download_url_ttl: int = 3600


def load_storage_config(settings: Optional[Settings] = None) -> StorageConfig:
    """Build the storage configuration from settings and validate it.

    Example:
        # MinIO
        S3_ENDPOINT_URL=http://localhost:9000
        S3_ACCESS_KEY_ID=minioadmin
        S3_SECRET_ACCESS_KEY=minioadmin

        # AWS S3 (no endpoint)
        S3_BUCKET_NAME=onboarding-prod-documents
        S3_REGION=ap-south-1
        UPLOAD_URL_TTL_SECONDS=900

    Raises:
        ValueError: If the configuration is invalid
    """
    settings = settings or get_settings()
    config = StorageConfig(
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        upload_url_ttl=settings.UPLOAD_URL_TTL_SECONDS,
        download_url_ttl=settings.DOWNLOAD_URL_TTL_SECONDS,
    )
    validate_storage_config(config)
    return config


def validate_storage_config(config: StorageConfig) -> None:
    """Raise ValueError describing the first problem found."""
    missing = [
        name for name in ("access_key", "secret_key", "bucket_name")
        if not getattr(config, name)
    ]
    if missing:
        raise ValueError(f"Storage {missing[0]} is required")

    if config.endpoint_url is None and not config.region:
        raise ValueError("S3 region is required when no endpoint_url is set")

    if config.endpoint_url is not None and not config.endpoint_url.startswith(("http://", "https://")):
        raise ValueError(f"Invalid endpoint_url: {config.endpoint_url} (expected an http:// or https:// URL)")

    for name in ("upload_url_ttl", "download_url_ttl"):
        ttl = getattr(config, name)
        if not 0 < ttl <= MAX_PRESIGN_TTL_SECONDS:
            raise ValueError(f"Storage {name} must be between 1 and {MAX_PRESIGN_TTL_SECONDS} seconds, got {ttl}")
