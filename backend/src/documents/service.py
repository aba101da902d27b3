"""Document lifecycle service.

Owns every state change of a user's onboarding documents:

    (absent) --upload--> PENDING --review--> APPROVED | REJECTED
        any  --delete or re-upload--> (absent)

Ordering of each operation:
1. Authorize and validate (nothing mutated yet)
2. Commit the state change through the repository
3. Object storage cleanup and notifications, each guarded on its own

Step 3 never raises. A failed email or notification is logged and counted
in onboarding_side_effect_failures_total; the committed change stands.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Union
from uuid import UUID, uuid4

from config import Settings, get_settings
from domain.documents import policy
from domain.documents.document_status import (
    REVIEW_DECISIONS,
    DocumentStatus,
    StateTransitionError,
    validate_transition,
)
from domain.documents.document_type import DocumentType, display_name
from domain.documents.ports.document_repository_port import DocumentRepository
from domain.documents.ports.object_storage_port import ObjectStoragePort, StorageError
from domain.documents.validation import (
    build_storage_key,
    is_supported_mime_type,
    parse_document_type,
    validate_file_size,
    validate_filename,
)
from domain.errors import (
    ConflictError,
    DependencyFailureError,
    NotFoundError,
    ValidationError,
)
from domain.notifications.notification_type import NotificationType
from domain.notifications.ports.notifier_port import NotifierPort
from domain.notifications.ports.user_directory_port import UserDirectoryPort
from models.document import Document
from notifications.email_templates import render_status_email, render_submission_email
from observability.metrics import (
    document_transitions_total,
    documents_superseded_total,
    side_effect_failures_total,
    upload_conflicts_total,
)

logger = logging.getLogger(__name__)


@dataclass
class UploadTicket:
    """Result of initiating an upload: the PENDING row plus where to PUT the bytes."""
    document: Document
    upload_url: str
    expires_in: int


@dataclass
class DocumentListing:
    documents: List[Document]
    counts: Dict[DocumentStatus, int] = field(default_factory=dict)


class DocumentLifecycleService:
    """Upload, supersede, review and delete onboarding documents.

    Example:
        service = DocumentLifecycleService(
            repository=SqlAlchemyDocumentRepository(db),
            storage=storage,
            notifier=NotificationDispatcher(db),
            users=SqlAlchemyUserDirectory(db),
        )
        ticket = await service.initiate_upload(
            caller=user,
            document_type="PAN_CARD",
            file_name="pan.pdf",
            file_size=182_331,
            file_type="application/pdf",
        )
    """

    def __init__(
        self,
        repository: DocumentRepository,
        storage: ObjectStoragePort,
        notifier: NotifierPort,
        users: UserDirectoryPort,
        settings: Optional[Settings] = None,
    ):
        self.repository = repository
        self.storage = storage
        self.notifier = notifier
        self.users = users
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def initiate_upload(
        self,
        caller,
        document_type: Union[str, DocumentType],
        file_name: str,
        file_size: int,
        file_type: str,
        owner_id: Optional[UUID] = None,
    ) -> UploadTicket:
        """Supersede any document of this type and hand back a presigned PUT URL.

        Raises:
            ForbiddenError: If owner_id is someone other than the caller
            ValidationError: If metadata is missing or invalid
            ConflictError: If a concurrent upload of the same type won the race
            DependencyFailureError: If the upload URL cannot be signed
        """
        policy.ensure_can_upload(caller, owner_id or caller.id)
        doc_type = self._validate_upload(document_type, file_name, file_size, file_type)
        document = self._new_document(caller, doc_type, file_name, file_size, file_type)

        # Signing is local to the SDK; do it before committing so a signing
        # failure leaves the previous document untouched
        expires_in = self.settings.UPLOAD_URL_TTL_SECONDS
        try:
            upload_url = await self.storage.generate_presigned_upload_url(
                document.storage_key,
                content_type=file_type,
                expires_in_seconds=expires_in,
            )
        except StorageError as e:
            raise DependencyFailureError(f"Could not prepare upload: {e}")

        superseded_keys = self._swap_in(document)
        await self._delete_superseded_objects(document, superseded_keys)
        self._notify_admins_of_upload(caller, document)

        return UploadTicket(document=document, upload_url=upload_url, expires_in=expires_in)

    async def upload_direct(
        self,
        caller,
        document_type: Union[str, DocumentType],
        file_name: str,
        content: bytes,
        file_type: str,
        owner_id: Optional[UUID] = None,
    ) -> Document:
        """Server-side upload: store the bytes, then supersede.

        If the row swap fails the freshly stored object is removed again, so
        storage never keeps bytes no row points to.
        """
        policy.ensure_can_upload(caller, owner_id or caller.id)
        doc_type = self._validate_upload(document_type, file_name, len(content or b""), file_type)
        document = self._new_document(caller, doc_type, file_name, len(content), file_type)

        try:
            await self.storage.store_file(document.storage_key, content, file_type)
        except StorageError as e:
            raise DependencyFailureError(f"Could not store file: {e}")

        try:
            superseded_keys = self._swap_in(document)
        except Exception:
            await self._delete_object_quietly(document.storage_key, document)
            raise

        await self._delete_superseded_objects(document, superseded_keys)
        self._notify_admins_of_upload(caller, document)
        return document

    async def confirm_upload(self, caller, document_id: UUID) -> Document:
        """Check that the client actually PUT the bytes to the presigned URL.

        Raises:
            ValidationError: If no object exists under the document's key yet
        """
        document = self._get_or_404(document_id)
        policy.ensure_can_access(caller, document)

        try:
            exists = await self.storage.file_exists(document.storage_key)
        except StorageError as e:
            raise DependencyFailureError(f"Could not verify upload: {e}")

        if not exists:
            raise ValidationError("File has not been uploaded to storage yet")

        logger.info(
            f"Upload confirmed: document_id={document.id}",
            extra={"document_id": document.id, "user_id": document.user_id},
        )
        return document

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def review(
        self,
        caller,
        document_id: UUID,
        status: Union[str, DocumentStatus],
        notes: Optional[str] = None,
    ) -> Document:
        """Approve or reject a PENDING document.

        This is the only way a document leaves PENDING.

        Raises:
            ForbiddenError: If the caller is not an admin
            ValidationError: If status is not APPROVED/REJECTED, or a rejection has blank notes
            NotFoundError: If the document does not exist
            ConflictError: If the document has already been reviewed
        """
        policy.ensure_can_review(caller)

        try:
            decision = DocumentStatus(status)
        except ValueError:
            decision = None
        if decision not in REVIEW_DECISIONS:
            allowed = ", ".join(s.value for s in REVIEW_DECISIONS)
            raise ValidationError(f"Invalid review status: {status}. Allowed: {allowed}")

        if decision == DocumentStatus.REJECTED and (notes is None or not notes.strip()):
            raise ValidationError("Notes are required when rejecting a document")

        # Locked read: a concurrent review either already shows here or waits for us
        document = self.repository.get_for_update(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")

        try:
            validate_transition(DocumentStatus(document.status), decision)
        except StateTransitionError:
            raise ConflictError(
                f"Document has already been reviewed (status: {DocumentStatus(document.status).value})"
            )

        document.status = decision
        document.reviewed_by = caller.id
        document.reviewed_at = datetime.now(timezone.utc)
        document.notes = notes if decision == DocumentStatus.REJECTED else None
        self.repository.update(document)

        document_transitions_total.labels(
            document_type=DocumentType(document.type).value,
            transition=decision.value.lower(),
        ).inc()
        logger.info(
            f"Document reviewed: document_id={document.id}, status={decision.value}, reviewer={caller.id}",
            extra={"document_id": document.id, "status": decision.value},
        )

        self._notify_owner_of_review(document)
        return document

    # ------------------------------------------------------------------
    # Reads and deletes
    # ------------------------------------------------------------------

    async def get(self, caller, document_id: UUID):
        """Return (document, presigned download URL)."""
        document = self._get_or_404(document_id)
        policy.ensure_can_access(caller, document)

        try:
            download_url = await self.storage.generate_presigned_url(
                document.storage_key,
                expires_in_seconds=self.settings.DOWNLOAD_URL_TTL_SECONDS,
            )
        except StorageError as e:
            raise DependencyFailureError(f"Could not sign download URL: {e}")

        return document, download_url

    async def delete(self, caller, document_id: UUID) -> None:
        """Delete the object bytes, then the row.

        If storage fails the row is left in place and DependencyFailureError
        is raised, so the document never points at bytes that are gone
        without the caller knowing.
        """
        document = self._get_or_404(document_id)
        policy.ensure_can_delete(caller, document)

        try:
            await self.storage.delete_file(document.storage_key)
        except StorageError as e:
            raise DependencyFailureError(f"Could not delete file from storage: {e}")

        doc_type = DocumentType(document.type).value
        self.repository.delete(document)

        document_transitions_total.labels(document_type=doc_type, transition="deleted").inc()
        logger.info(
            f"Document deleted: document_id={document_id}, by={caller.id}",
            extra={"document_id": document_id},
        )

    def list_for_user(self, caller, user_id: Optional[UUID] = None) -> List[Document]:
        """Documents of one user, newest first. Defaults to the caller's own."""
        user_id = user_id or caller.id
        if user_id != caller.id:
            policy.ensure_can_list_all(caller)
        return self.repository.list_for_user(user_id)

    def list_all(
        self,
        caller,
        status: Optional[DocumentStatus] = None,
        user_id: Optional[UUID] = None,
        document_type: Optional[DocumentType] = None,
    ) -> DocumentListing:
        """Admin view over every document, with counts by status."""
        policy.ensure_can_list_all(caller)
        return DocumentListing(
            documents=self.repository.list_all(
                status=status,
                user_id=user_id,
                document_type=document_type,
            ),
            counts=self.repository.count_by_status(user_id=user_id),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_or_404(self, document_id: UUID) -> Document:
        document = self.repository.get(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    def _validate_upload(self, document_type, file_name, file_size, file_type) -> DocumentType:
        doc_type, error = parse_document_type(document_type)
        if error:
            raise ValidationError(error)

        is_valid, error = validate_filename(file_name)
        if not is_valid:
            raise ValidationError(error)

        is_valid, error = validate_file_size(file_size, self.settings.MAX_UPLOAD_SIZE_BYTES)
        if not is_valid:
            raise ValidationError(error)

        if not is_supported_mime_type(file_type):
            raise ValidationError(
                f"Unsupported file type: {file_type}. Upload a PDF, JPEG or PNG file"
            )

        return doc_type

    def _new_document(self, caller, doc_type, file_name, file_size, file_type) -> Document:
        now = datetime.now(timezone.utc)
        return Document(
            id=uuid4(),
            user_id=caller.id,
            type=doc_type,
            file_name=file_name,
            file_size=file_size,
            file_type=file_type,
            storage_key=build_storage_key(caller.id, doc_type, file_name, now=now),
            status=DocumentStatus.PENDING,
            uploaded_at=now,
            updated_at=now,
        )

    def _swap_in(self, document: Document) -> List[str]:
        validate_transition(None, DocumentStatus.PENDING)
        try:
            superseded_keys = self.repository.replace_for_user_and_type(document)
        except ConflictError:
            upload_conflicts_total.inc()
            raise

        doc_type = DocumentType(document.type).value
        document_transitions_total.labels(document_type=doc_type, transition="uploaded").inc()
        if superseded_keys:
            documents_superseded_total.labels(document_type=doc_type).inc(len(superseded_keys))
        logger.info(
            f"Document uploaded: document_id={document.id}, type={doc_type}, "
            f"superseded={len(superseded_keys)}",
            extra={"document_id": document.id, "user_id": document.user_id, "document_type": doc_type},
        )
        return superseded_keys

    async def _delete_superseded_objects(self, document: Document, keys: List[str]) -> None:
        for key in keys:
            # Two uploads in the same millisecond with the same name share a key
            if key != document.storage_key:
                await self._delete_object_quietly(key, document)

    async def _delete_object_quietly(self, key: str, document: Document) -> None:
        try:
            await self.storage.delete_file(key)
        except Exception as e:
            side_effect_failures_total.labels(effect="object_cleanup").inc()
            logger.error(
                f"Failed to delete orphaned object: storage_key={key}, error={e}",
                extra={"document_id": document.id},
            )

    def _side_effect(self, effect: str, action: Callable[[], None], document: Document) -> None:
        try:
            action()
        except Exception as e:
            side_effect_failures_total.labels(effect=effect).inc()
            logger.error(
                f"Side effect '{effect}' failed after committed transition: {type(e).__name__}: {e}",
                exc_info=True,
                extra={"document_id": document.id, "user_id": document.user_id},
            )

    def _notify_admins_of_upload(self, caller, document: Document) -> None:
        label = display_name(document.type)
        user_name = caller.name or caller.email
        admin_link = f"/admin/users/{caller.id}?tab=documents"
        subject, html = render_submission_email(
            user_name=caller.name,
            user_email=caller.email,
            document_type=label,
            file_name=document.file_name,
            submitted_on=document.uploaded_at,
            review_url=f"{self.settings.APP_BASE_URL}{admin_link}",
        )

        admins = []
        self._side_effect("notification", lambda: admins.extend(self.users.list_admins()), document)

        for admin in admins:
            self._side_effect(
                "notification",
                lambda admin=admin: self.notifier.notify(
                    admin.id,
                    "New Document Uploaded",
                    f"{user_name} has uploaded a new {label} for review.",
                    NotificationType.DOCUMENT_UPLOADED,
                    document_id=document.id,
                    document_type=DocumentType(document.type).value,
                    link=admin_link,
                ),
                document,
            )
            self._side_effect(
                "email",
                lambda admin=admin: self.notifier.send_email(admin.email, subject, html),
                document,
            )

    def _notify_owner_of_review(self, document: Document) -> None:
        owner = None
        try:
            owner = self.users.get_user(document.user_id)
        except Exception as e:
            side_effect_failures_total.labels(effect="notification").inc()
            logger.error(f"Could not load document owner for notification: {e}", exc_info=True)
        if owner is None:
            return

        label = display_name(document.type)
        approved = DocumentStatus(document.status) == DocumentStatus.APPROVED
        tab = "approved" if approved else "rejected"
        link = f"/user/documents?tab={tab}"

        if approved:
            title = f"{label} Approved"
            message = f"Your {label} document has been approved."
            notification_type = NotificationType.DOCUMENT_APPROVED
        else:
            title = f"{label} Rejected"
            message = f"Your {label} document was rejected. Please upload a new one."
            notification_type = NotificationType.DOCUMENT_REJECTED

        self._side_effect(
            "notification",
            lambda: self.notifier.notify(
                owner.id,
                title,
                message,
                notification_type,
                document_id=document.id,
                document_type=DocumentType(document.type).value,
                link=link,
            ),
            document,
        )

        subject, html = render_status_email(
            user_name=owner.name,
            document_type=label,
            status=DocumentStatus(document.status),
            file_name=document.file_name,
            submitted_on=document.uploaded_at,
            reviewed_on=document.reviewed_at,
            link=f"{self.settings.APP_BASE_URL}{link}",
            notes=document.notes,
        )
        self._side_effect(
            "email",
            lambda: self.notifier.send_email(owner.email, subject, html),
            document,
        )
