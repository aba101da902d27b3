"""File validation utilities for onboarding document uploads"""

import os
import re
from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID

from .document_type import DocumentType


# Scans and photos of identity documents
SUPPORTED_MIME_TYPES = {
    'application/pdf',
    'image/jpeg',
    'image/png',
}


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type is supported for upload

    Example:
        >>> is_supported_mime_type('application/pdf')
        True
        >>> is_supported_mime_type('application/msword')
        False
    """
    return mime_type in SUPPORTED_MIME_TYPES


def parse_document_type(value: Optional[str]) -> Tuple[Optional[DocumentType], Optional[str]]:
    """Parse a document type drawn from the fixed enumeration

    Returns:
        Tuple of (document_type, error_message)
    """
    if not value:
        return None, "Document type is required"
    try:
        return DocumentType(value), None
    except ValueError:
        allowed = ", ".join(t.value for t in DocumentType)
        return None, f"Unknown document type: {value}. Allowed: {allowed}"


def validate_file_size(size_bytes: Optional[int], max_size: int) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Args:
        size_bytes: File size in bytes
        max_size: Maximum allowed size (Settings.MAX_UPLOAD_SIZE_BYTES)

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_file_size(1024, 10 * 1024 * 1024)
        (True, None)
        >>> validate_file_size(0, 10 * 1024 * 1024)
        (False, 'File is empty (0 bytes)')
    """
    if size_bytes is None:
        return False, "File size is required"

    if size_bytes <= 0:
        return False, "File is empty (0 bytes)"

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_filename(filename: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate filename

    Validation rules:
    - Not empty
    - Max 255 characters
    - No path traversal (../, ..\\)
    - No null bytes or control characters

    Example:
        >>> validate_filename('pan.pdf')
        (True, None)
        >>> validate_filename('../../etc/passwd')
        (False, 'Filename contains path traversal or directory separators')
    """
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > 255:
        return False, f"Filename exceeds 255 characters (got {len(filename)})"

    if '..' in filename or '/' in filename or '\\' in filename:
        return False, "Filename contains path traversal or directory separators"

    if '\x00' in filename:
        return False, "Filename contains null bytes"

    if any(ord(c) < 32 for c in filename):
        return False, "Filename contains control characters"

    return True, None


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage

    Example:
        >>> sanitize_filename('../../pan.pdf')
        'pan.pdf'
        >>> sanitize_filename('pan card (front).pdf')
        'pan_card_front_.pdf'
    """
    # Remove path components
    filename = os.path.basename(filename)

    # Replace problematic characters with underscore
    filename = re.sub(r'[^\w\s.-]', '_', filename)

    # Collapse multiple spaces/underscores
    filename = re.sub(r'[\s_]+', '_', filename)

    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        max_name_len = 255 - len(ext)
        filename = name[:max_name_len] + ext

    return filename


def build_storage_key(
    user_id: UUID,
    document_type: DocumentType,
    filename: str,
    now: Optional[datetime] = None,
) -> str:
    """Generate the object key for a new upload

    Format: documents/{user_id}/{TYPE}_{epoch_ms}_{sanitized_filename}

    Example:
        >>> build_storage_key(UUID(int=1), DocumentType.PAN_CARD, 'pan.pdf',
        ...                   datetime(2025, 1, 1, tzinfo=timezone.utc))
        'documents/00000000-0000-0000-0000-000000000001/PAN_CARD_1735689600000_pan.pdf'
    """
    if now is None:
        now = datetime.now(timezone.utc)
    timestamp_ms = int(now.timestamp() * 1000)
    return f"documents/{user_id}/{DocumentType(document_type).value}_{timestamp_ms}_{sanitize_filename(filename)}"
