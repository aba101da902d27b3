"""Admin document endpoints: cross-user listing and review."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from auth.dependencies import CurrentUser
from documents.dependencies import get_lifecycle_service
from documents.schemas import (
    AdminDocumentListResponse,
    DocumentResponse,
    ReviewRequest,
)
from documents.service import DocumentLifecycleService
from domain.documents.document_status import DocumentStatus
from domain.documents.document_type import DocumentType

router = APIRouter(prefix="/admin/documents", tags=["Admin Documents"])


@router.get("", response_model=AdminDocumentListResponse, summary="List all documents (ADMIN)")
def list_documents(
    current_user: CurrentUser,
    status: Optional[DocumentStatus] = Query(None, description="Filter by review status"),
    user_id: Optional[UUID] = Query(None, description="Filter by owner"),
    document_type: Optional[DocumentType] = Query(None, alias="type", description="Filter by document type"),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> AdminDocumentListResponse:
    # Role is checked by the service policy so the 403 message is uniform
    listing = service.list_all(current_user, status=status, user_id=user_id, document_type=document_type)
    return AdminDocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in listing.documents],
        total=len(listing.documents),
        counts=listing.counts,
    )


@router.post(
    "/{document_id}/review",
    response_model=DocumentResponse,
    summary="Approve or reject a PENDING document (ADMIN)",
)
def review_document(
    document_id: UUID,
    data: ReviewRequest,
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> DocumentResponse:
    document = service.review(current_user, document_id, data.status, data.notes)
    return DocumentResponse.model_validate(document)
