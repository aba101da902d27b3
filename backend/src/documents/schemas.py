"""Document API request/response schemas"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType


class UploadInitRequest(BaseModel):
    """Metadata sent before the client PUTs the bytes to the presigned URL"""
    document_type: str = Field(..., description="PAN_CARD, AADHAR_CARD, CANCELLED_CHEQUE or OFFER_LETTER")
    file_name: str = Field(..., description="Original filename")
    file_size: int = Field(..., description="File size in bytes")
    file_type: str = Field(..., description="MIME type (application/pdf, image/jpeg, image/png)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "document_type": "PAN_CARD",
                "file_name": "pan.pdf",
                "file_size": 182331,
                "file_type": "application/pdf",
            }
        }
    )


class UploadInitResponse(BaseModel):
    document_id: UUID = Field(..., description="UUID of the new PENDING document")
    upload_url: str = Field(..., description="Presigned PUT URL")
    storage_key: str = Field(..., description="Object key the bytes must be uploaded to")
    expires_in: int = Field(..., description="Seconds until upload_url expires")


class DocumentResponse(BaseModel):
    id: UUID
    user_id: UUID
    type: DocumentType
    file_name: str
    file_size: int
    file_type: str
    storage_key: str
    status: DocumentStatus
    uploaded_at: datetime
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DocumentDetailResponse(DocumentResponse):
    download_url: str = Field(..., description="Presigned GET URL")


class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]
    total: int


class AdminDocumentListResponse(BaseModel):
    documents: List[DocumentResponse]
    total: int
    counts: Dict[DocumentStatus, int] = Field(..., description="Document counts by status")


class ReviewRequest(BaseModel):
    """Admin decision on a PENDING document"""
    status: str = Field(..., description="APPROVED or REJECTED")
    notes: Optional[str] = Field(None, description="Rejection reason (required when rejecting)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"status": "REJECTED", "notes": "Image is blurry, please re-scan"}
        }
    )
