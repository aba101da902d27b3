"""Document API endpoints for onboarding users.

Upload flow:
1. POST /documents            -> PENDING row + presigned PUT URL
2. client PUTs the bytes to upload_url
3. POST /documents/{id}/confirm -> verifies the object landed

POST /documents/upload is the server-side alternative for clients that
cannot PUT to S3 directly.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from auth.dependencies import CurrentUser
from documents.dependencies import get_lifecycle_service
from documents.schemas import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    UploadInitRequest,
    UploadInitResponse,
)
from documents.service import DocumentLifecycleService
from domain.errors import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


async def read_upload_within_limit(file: UploadFile, max_size: int) -> bytes:
    """Read an uploaded file without ever buffering more than max_size + 1 bytes."""
    if file.size is not None and file.size > max_size:
        raise ValidationError(f"File exceeds maximum size of {max_size} bytes (got {file.size} bytes)")

    content = await file.read(max_size + 1)
    if len(content) > max_size:
        raise ValidationError(f"File exceeds maximum size of {max_size} bytes")
    return content


@router.post(
    "",
    response_model=UploadInitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a document upload",
    description="Replaces any existing document of the same type and returns a presigned upload URL.",
)
async def initiate_upload(
    data: UploadInitRequest,
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> UploadInitResponse:
    ticket = await service.initiate_upload(
        caller=current_user,
        document_type=data.document_type,
        file_name=data.file_name,
        file_size=data.file_size,
        file_type=data.file_type,
    )
    return UploadInitResponse(
        document_id=ticket.document.id,
        upload_url=ticket.upload_url,
        storage_key=ticket.document.storage_key,
        expires_in=ticket.expires_in,
    )


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a document through the server",
)
async def upload_document(
    current_user: CurrentUser,
    document_type: str = Form(...),
    file: UploadFile = File(...),
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> DocumentResponse:
    content = await read_upload_within_limit(file, service.settings.MAX_UPLOAD_SIZE_BYTES)
    document = await service.upload_direct(
        caller=current_user,
        document_type=document_type,
        file_name=file.filename or "",
        content=content,
        file_type=file.content_type or "application/octet-stream",
    )
    return DocumentResponse.model_validate(document)


@router.post(
    "/{document_id}/confirm",
    response_model=DocumentResponse,
    summary="Confirm the client finished uploading",
)
async def confirm_upload(
    document_id: UUID,
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> DocumentResponse:
    document = await service.confirm_upload(current_user, document_id)
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse, summary="List my documents")
def list_my_documents(
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> DocumentListResponse:
    documents: List = service.list_for_user(current_user)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents],
        total=len(documents),
    )


@router.get(
    "/{document_id}",
    response_model=DocumentDetailResponse,
    summary="Get a document with a download URL",
)
async def get_document(
    document_id: UUID,
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> DocumentDetailResponse:
    document, download_url = await service.get(current_user, document_id)
    return DocumentDetailResponse(
        **DocumentResponse.model_validate(document).model_dump(),
        download_url=download_url,
    )


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a document and its file",
)
async def delete_document(
    document_id: UUID,
    current_user: CurrentUser,
    service: DocumentLifecycleService = Depends(get_lifecycle_service),
) -> None:
    await service.delete(current_user, document_id)
