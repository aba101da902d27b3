"""Documents domain module - document lifecycle, status rules, upload validation"""

from .document_status import (
    DocumentStatus,
    StateTransitionError,
    can_transition,
    validate_transition,
    get_allowed_transitions,
    ALLOWED_TRANSITIONS,
    REVIEW_DECISIONS,
)
from .document_type import DocumentType, display_name
from .validation import (
    is_supported_mime_type,
    parse_document_type,
    validate_file_size,
    validate_filename,
    sanitize_filename,
    build_storage_key,
    SUPPORTED_MIME_TYPES,
)

__all__ = [
    "DocumentStatus",
    "DocumentType",
    "display_name",
    "StateTransitionError",
    "can_transition",
    "validate_transition",
    "get_allowed_transitions",
    "ALLOWED_TRANSITIONS",
    "REVIEW_DECISIONS",
    "is_supported_mime_type",
    "parse_document_type",
    "validate_file_size",
    "validate_filename",
    "sanitize_filename",
    "build_storage_key",
    "SUPPORTED_MIME_TYPES",
]
