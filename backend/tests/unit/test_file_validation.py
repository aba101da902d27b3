"""Unit tests for upload validation utilities"""

from datetime import datetime, timezone
from uuid import UUID

import pytest

from config import Settings
from domain.documents import (
    SUPPORTED_MIME_TYPES,
    DocumentType,
    build_storage_key,
    is_supported_mime_type,
    parse_document_type,
    sanitize_filename,
    validate_file_size,
    validate_filename,
)
from domain.documents.document_type import display_name

LIMIT = 10 * 1024 * 1024


class TestMimeTypeValidation:

    def test_supported_mime_types_constant(self):
        assert SUPPORTED_MIME_TYPES == {'application/pdf', 'image/jpeg', 'image/png'}

    @pytest.mark.parametrize("mime_type", ['application/pdf', 'image/jpeg', 'image/png'])
    def test_scans_and_photos_supported(self, mime_type):
        assert is_supported_mime_type(mime_type) is True

    @pytest.mark.parametrize("mime_type", [
        'application/msword',
        'text/csv',
        'application/octet-stream',
        '',
        None,
    ])
    def test_other_types_rejected(self, mime_type):
        assert is_supported_mime_type(mime_type) is False


class TestDocumentType:

    @pytest.mark.parametrize("value", ["PAN_CARD", "AADHAR_CARD", "CANCELLED_CHEQUE", "OFFER_LETTER"])
    def test_known_types_parse(self, value):
        doc_type, error = parse_document_type(value)
        assert doc_type == DocumentType(value)
        assert error is None

    def test_unknown_type_lists_allowed_values(self):
        doc_type, error = parse_document_type("PASSPORT")
        assert doc_type is None
        assert "PASSPORT" in error
        assert "OFFER_LETTER" in error

    def test_missing_type(self):
        assert parse_document_type(None) == (None, "Document type is required")

    def test_types_are_case_sensitive(self):
        doc_type, error = parse_document_type("pan_card")
        assert doc_type is None

    def test_display_names(self):
        assert display_name(DocumentType.PAN_CARD) == "PAN Card"
        assert display_name("AADHAR_CARD") == "Aadhaar Card"
        assert display_name(DocumentType.CANCELLED_CHEQUE) == "Cancelled Cheque"


class TestFileSizeValidation:

    def test_default_limit_is_ten_megabytes(self):
        assert Settings.model_fields["MAX_UPLOAD_SIZE_BYTES"].default == LIMIT

    def test_valid_size(self):
        assert validate_file_size(1024, LIMIT) == (True, None)

    def test_exactly_at_limit(self):
        assert validate_file_size(LIMIT, LIMIT) == (True, None)

    def test_over_limit(self):
        is_valid, error = validate_file_size(LIMIT + 1, LIMIT)
        assert is_valid is False
        assert "exceeds maximum size" in error

    def test_custom_limit(self):
        assert validate_file_size(200, max_size=100)[0] is False

    @pytest.mark.parametrize("size", [0, -1])
    def test_empty_file(self, size):
        assert validate_file_size(size, LIMIT) == (False, "File is empty (0 bytes)")

    def test_missing_size(self):
        assert validate_file_size(None, LIMIT) == (False, "File size is required")


class TestFilenameValidation:

    def test_valid_filename(self):
        assert validate_filename("pan card.pdf") == (True, None)

    @pytest.mark.parametrize("filename", ["", "   ", None])
    def test_empty_filename(self, filename):
        assert validate_filename(filename)[0] is False

    @pytest.mark.parametrize("filename", ["../pan.pdf", "a/b.pdf", "a\\b.pdf"])
    def test_path_traversal(self, filename):
        is_valid, error = validate_filename(filename)
        assert is_valid is False
        assert "path traversal" in error

    def test_null_byte(self):
        assert validate_filename("pan\x00.pdf") == (False, "Filename contains null bytes")

    def test_control_characters(self):
        assert validate_filename("pan\n.pdf") == (False, "Filename contains control characters")

    def test_too_long(self):
        assert validate_filename("a" * 252 + ".pdf")[0] is False


class TestSanitizeFilename:

    def test_strips_directories(self):
        assert sanitize_filename("../../pan.pdf") == "pan.pdf"

    def test_replaces_special_characters(self):
        assert sanitize_filename("pan card (front).pdf") == "pan_card_front_.pdf"

    def test_truncates_preserving_extension(self):
        result = sanitize_filename("a" * 300 + ".pdf")
        assert len(result) == 255
        assert result.endswith(".pdf")


class TestBuildStorageKey:

    def test_key_layout(self):
        key = build_storage_key(
            UUID(int=7),
            DocumentType.OFFER_LETTER,
            "offer letter.pdf",
            now=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        assert key == (
            "documents/00000000-0000-0000-0000-000000000007/"
            "OFFER_LETTER_1735689600000_offer_letter.pdf"
        )

    def test_keys_differ_per_instant(self):
        user_id = UUID(int=1)
        first = build_storage_key(user_id, DocumentType.PAN_CARD, "pan.pdf",
                                  now=datetime(2025, 1, 1, 0, 0, 0, 1000, tzinfo=timezone.utc))
        second = build_storage_key(user_id, DocumentType.PAN_CARD, "pan.pdf",
                                   now=datetime(2025, 1, 1, 0, 0, 0, 2000, tzinfo=timezone.utc))
        assert first != second
