"""Unit tests for DocumentLifecycleService

Runs the service against the in-memory repository, the fake object store
and a recording notifier, so every rule is exercised without a database.
"""

import asyncio
from types import SimpleNamespace
from uuid import uuid4

import pytest

from documents.service import DocumentLifecycleService
from domain.documents import DocumentStatus, DocumentType
from domain.errors import (
    ConflictError,
    DependencyFailureError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from domain.notifications.notification_type import NotificationType
from infrastructure.repositories.document_repository import InMemoryDocumentRepository


def make_caller(email: str, name: str, role: str = "USER"):
    return SimpleNamespace(id=uuid4(), email=email, name=name, role=role)


@pytest.fixture
def owner():
    return make_caller("asha@test.com", "Asha Rao")


@pytest.fixture
def stranger():
    return make_caller("ravi@test.com", "Ravi Kumar")


@pytest.fixture
def admin():
    return make_caller("hr@test.com", "HR Admin", role="ADMIN")


@pytest.fixture
def repository():
    return InMemoryDocumentRepository()


@pytest.fixture
def service(repository, storage, notifier, stub_users, owner, stranger, admin):
    return DocumentLifecycleService(
        repository=repository,
        storage=storage,
        notifier=notifier,
        users=stub_users(owner, stranger, admin),
    )


async def upload(service, caller, document_type="PAN_CARD", file_name="pan.pdf", content=b"%PDF-1.4 scan"):
    return await service.upload_direct(
        caller=caller,
        document_type=document_type,
        file_name=file_name,
        content=content,
        file_type="application/pdf",
    )


class TestInitiateUpload:

    @pytest.mark.asyncio
    async def test_creates_pending_document_with_upload_url(self, service, repository, owner):
        ticket = await service.initiate_upload(
            caller=owner,
            document_type="PAN_CARD",
            file_name="pan.pdf",
            file_size=1024,
            file_type="application/pdf",
        )

        document = ticket.document
        assert document.status == DocumentStatus.PENDING
        assert document.user_id == owner.id
        assert document.type == DocumentType.PAN_CARD
        assert document.reviewed_by is None
        assert document.notes is None
        assert document.storage_key.startswith(f"documents/{owner.id}/PAN_CARD_")
        assert ticket.upload_url.startswith(f"https://storage.test/{document.storage_key}?op=put")
        assert ticket.expires_in == 3600
        assert repository.get(document.id) is document

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,message", [
        ({"document_type": "PASSPORT"}, "Unknown document type"),
        ({"file_name": ""}, "Filename cannot be empty"),
        ({"file_size": 0}, "File is empty"),
        ({"file_size": 10 * 1024 * 1024 + 1}, "exceeds maximum size"),
        ({"file_type": "application/zip"}, "Unsupported file type"),
    ])
    async def test_invalid_metadata_rejected(self, service, repository, owner, overrides, message):
        request = {
            "document_type": "PAN_CARD",
            "file_name": "pan.pdf",
            "file_size": 1024,
            "file_type": "application/pdf",
        }
        request.update(overrides)

        with pytest.raises(ValidationError, match=message):
            await service.initiate_upload(caller=owner, **request)

        assert repository.list_all() == []

    @pytest.mark.asyncio
    async def test_signing_failure_keeps_previous_document(self, service, repository, storage, owner):
        previous = await upload(service, owner)
        storage.failing.add("presign")

        with pytest.raises(DependencyFailureError):
            await service.initiate_upload(
                caller=owner,
                document_type="PAN_CARD",
                file_name="pan-v2.pdf",
                file_size=1024,
                file_type="application/pdf",
            )

        assert repository.list_for_user(owner.id) == [previous]
        assert previous.storage_key in storage.objects

    @pytest.mark.asyncio
    async def test_admin_cannot_upload_for_someone_else(self, service, repository, storage, owner, admin):
        with pytest.raises(ForbiddenError):
            await service.initiate_upload(
                caller=admin,
                document_type="PAN_CARD",
                file_name="pan.pdf",
                file_size=1024,
                file_type="application/pdf",
                owner_id=owner.id,
            )

        with pytest.raises(ForbiddenError):
            await service.upload_direct(
                caller=admin,
                document_type="PAN_CARD",
                file_name="pan.pdf",
                content=b"%PDF-1.4 scan",
                file_type="application/pdf",
                owner_id=owner.id,
            )

        assert repository.list_all() == []
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_explicit_owner_matching_caller_is_allowed(self, service, repository, owner):
        document = await upload(service, owner)
        ticket = await service.initiate_upload(
            caller=owner,
            document_type="OFFER_LETTER",
            file_name="offer.pdf",
            file_size=1024,
            file_type="application/pdf",
            owner_id=owner.id,
        )

        assert {d.id for d in repository.list_for_user(owner.id)} == {document.id, ticket.document.id}


class TestSupersession:

    @pytest.mark.asyncio
    async def test_reupload_replaces_document_and_object(self, service, repository, storage, owner):
        first = await upload(service, owner, file_name="pan-v1.pdf")
        second = await upload(service, owner, file_name="pan-v2.pdf")

        documents = repository.list_for_user(owner.id)
        assert documents == [second]
        assert repository.get(first.id) is None
        assert first.storage_key not in storage.objects
        assert second.storage_key in storage.objects

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [3, 5])
    async def test_repeated_uploads_keep_only_the_last(self, service, repository, storage, owner, count):
        uploads = []
        for version in range(1, count + 1):
            content = f"%PDF-1.4 pan v{version}".encode()
            uploads.append(await upload(service, owner, file_name=f"pan-v{version}.pdf", content=content))

        last = uploads[-1]
        documents = repository.list_for_user(owner.id)
        assert [d.id for d in documents] == [last.id]
        assert documents[0].file_name == f"pan-v{count}.pdf"
        assert documents[0].file_size == len(f"%PDF-1.4 pan v{count}".encode())
        assert storage.objects == {last.storage_key: f"%PDF-1.4 pan v{count}".encode()}

    @pytest.mark.asyncio
    async def test_reupload_after_rejection_starts_pending(self, service, repository, owner, admin):
        first = await upload(service, owner, file_name="pan-v1.pdf")
        service.review(admin, first.id, "REJECTED", notes="Blurry")

        second = await upload(service, owner, file_name="pan-v2.pdf")

        assert second.status == DocumentStatus.PENDING
        assert second.notes is None
        assert second.reviewed_by is None
        assert repository.list_for_user(owner.id) == [second]

    @pytest.mark.asyncio
    async def test_other_types_are_untouched(self, service, repository, owner):
        pan = await upload(service, owner, "PAN_CARD", "pan.pdf")
        offer = await upload(service, owner, "OFFER_LETTER", "offer.pdf")

        assert {d.id for d in repository.list_for_user(owner.id)} == {pan.id, offer.id}

    @pytest.mark.asyncio
    async def test_concurrent_uploads_leave_one_document(self, service, repository, owner):
        async def start(name):
            return await service.initiate_upload(
                caller=owner,
                document_type="AADHAR_CARD",
                file_name=name,
                file_size=2048,
                file_type="image/jpeg",
            )

        tickets = await asyncio.gather(*(start(f"aadhar-{i}.jpg") for i in range(5)))

        remaining = repository.list_all(user_id=owner.id, document_type=DocumentType.AADHAR_CARD)
        assert len(remaining) == 1
        assert remaining[0].id in {t.document.id for t in tickets}

    @pytest.mark.asyncio
    async def test_swap_failure_removes_new_object(self, service, repository, storage, owner, monkeypatch):
        def lose_race(document):
            raise ConflictError("Another upload of this document type is in progress, please retry")

        monkeypatch.setattr(repository, "replace_for_user_and_type", lose_race)

        with pytest.raises(ConflictError):
            await upload(service, owner)

        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_store_failure_is_dependency_failure(self, service, repository, storage, owner):
        storage.failing.add("put")

        with pytest.raises(DependencyFailureError):
            await upload(service, owner)

        assert repository.list_all() == []

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_fail_upload(self, service, repository, storage, owner):
        first = await upload(service, owner, file_name="pan-v1.pdf")
        storage.failing.add("delete")

        second = await upload(service, owner, file_name="pan-v2.pdf")

        assert repository.list_for_user(owner.id) == [second]
        # Orphaned bytes are logged and left behind
        assert first.storage_key in storage.objects


class TestUploadNotifications:

    @pytest.mark.asyncio
    async def test_admins_notified_of_upload(self, service, notifier, owner, admin):
        document = await upload(service, owner)

        assert notifier.notifications == [{
            "user_id": admin.id,
            "title": "New Document Uploaded",
            "message": "Asha Rao has uploaded a new PAN Card for review.",
            "type": NotificationType.DOCUMENT_UPLOADED,
            "document_id": document.id,
            "document_type": "PAN_CARD",
            "link": f"/admin/users/{owner.id}?tab=documents",
        }]
        assert len(notifier.emails) == 1
        email = notifier.emails[0]
        assert email["to"] == "hr@test.com"
        assert email["subject"] == "New Document Submission"
        assert f"https://onboarding.test/admin/users/{owner.id}?tab=documents" in email["html"]

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_fail_upload(self, service, repository, notifier, owner):
        notifier.fail = True

        document = await upload(service, owner)

        assert repository.get(document.id) is document
        assert document.status == DocumentStatus.PENDING


class TestConfirmUpload:

    @pytest.mark.asyncio
    async def test_missing_object_is_validation_error(self, service, owner):
        ticket = await service.initiate_upload(
            caller=owner,
            document_type="PAN_CARD",
            file_name="pan.pdf",
            file_size=1024,
            file_type="application/pdf",
        )

        with pytest.raises(ValidationError):
            await service.confirm_upload(owner, ticket.document.id)

    @pytest.mark.asyncio
    async def test_confirm_after_put(self, service, storage, owner):
        ticket = await service.initiate_upload(
            caller=owner,
            document_type="PAN_CARD",
            file_name="pan.pdf",
            file_size=4,
            file_type="application/pdf",
        )
        storage.objects[ticket.document.storage_key] = b"%PDF"

        document = await service.confirm_upload(owner, ticket.document.id)

        assert document.id == ticket.document.id

    @pytest.mark.asyncio
    async def test_stranger_cannot_confirm(self, service, owner, stranger):
        document = await upload(service, owner)

        with pytest.raises(ForbiddenError):
            await service.confirm_upload(stranger, document.id)


class TestReview:

    @pytest.mark.asyncio
    async def test_approve(self, service, notifier, owner, admin):
        document = await upload(service, owner)
        notifier.notifications.clear()
        notifier.emails.clear()

        reviewed = service.review(admin, document.id, "APPROVED", notes="looks fine")

        assert reviewed.status == DocumentStatus.APPROVED
        assert reviewed.reviewed_by == admin.id
        assert reviewed.reviewed_at is not None
        # Notes are only kept on rejection
        assert reviewed.notes is None

        assert len(notifier.notifications) == 1
        notification = notifier.notifications[0]
        assert notification["user_id"] == owner.id
        assert notification["title"] == "PAN Card Approved"
        assert notification["type"] == NotificationType.DOCUMENT_APPROVED
        assert notification["link"] == "/user/documents?tab=approved"
        assert notifier.emails[0]["to"] == "asha@test.com"
        assert notifier.emails[0]["subject"] == "Document Approved"

    @pytest.mark.asyncio
    async def test_reject_keeps_notes(self, service, notifier, owner, admin):
        document = await upload(service, owner)
        notifier.notifications.clear()
        notifier.emails.clear()

        reviewed = service.review(admin, document.id, DocumentStatus.REJECTED, notes="Scan is cut off")

        assert reviewed.status == DocumentStatus.REJECTED
        assert reviewed.notes == "Scan is cut off"
        assert notifier.notifications[0]["title"] == "PAN Card Rejected"
        assert notifier.notifications[0]["message"] == (
            "Your PAN Card document was rejected. Please upload a new one."
        )
        assert notifier.notifications[0]["link"] == "/user/documents?tab=rejected"
        assert "Scan is cut off" in notifier.emails[0]["html"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("notes", [None, "", "   "])
    async def test_reject_requires_notes(self, service, repository, owner, admin, notes):
        document = await upload(service, owner)

        with pytest.raises(ValidationError, match="Notes are required"):
            service.review(admin, document.id, "REJECTED", notes=notes)

        assert repository.get(document.id).status == DocumentStatus.PENDING

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["PENDING", "DELETED", "approved"])
    async def test_invalid_decision(self, service, owner, admin, status):
        document = await upload(service, owner)

        with pytest.raises(ValidationError, match="Invalid review status"):
            service.review(admin, document.id, status)

    @pytest.mark.asyncio
    async def test_already_reviewed_is_conflict(self, service, owner, admin):
        document = await upload(service, owner)
        service.review(admin, document.id, "APPROVED")

        with pytest.raises(ConflictError):
            service.review(admin, document.id, "REJECTED", notes="changed my mind")

    @pytest.mark.asyncio
    async def test_non_admin_cannot_review(self, service, repository, owner):
        document = await upload(service, owner)

        with pytest.raises(ForbiddenError):
            service.review(owner, document.id, "APPROVED")

        assert repository.get(document.id).status == DocumentStatus.PENDING

    def test_missing_document(self, service, admin):
        with pytest.raises(NotFoundError):
            service.review(admin, uuid4(), "APPROVED")

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_review(self, service, repository, notifier, owner, admin):
        document = await upload(service, owner)
        notifier.fail = True

        service.review(admin, document.id, "APPROVED")

        assert repository.get(document.id).status == DocumentStatus.APPROVED


class TestReadAndDelete:

    @pytest.mark.asyncio
    async def test_owner_gets_download_url(self, service, owner):
        document = await upload(service, owner)

        found, url = await service.get(owner, document.id)

        assert found is document
        assert url.startswith(f"https://storage.test/{document.storage_key}?op=get")

    @pytest.mark.asyncio
    async def test_admin_can_read_any_document(self, service, owner, admin):
        document = await upload(service, owner)

        found, _ = await service.get(admin, document.id)

        assert found is document

    @pytest.mark.asyncio
    async def test_stranger_cannot_read(self, service, owner, stranger):
        document = await upload(service, owner)

        with pytest.raises(ForbiddenError):
            await service.get(stranger, document.id)

    @pytest.mark.asyncio
    async def test_delete_removes_object_then_row(self, service, repository, storage, owner):
        document = await upload(service, owner)

        await service.delete(owner, document.id)

        assert repository.get(document.id) is None
        assert storage.deleted == [document.storage_key]
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_admin_can_delete(self, service, repository, owner, admin):
        document = await upload(service, owner)

        await service.delete(admin, document.id)

        assert repository.get(document.id) is None

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_row(self, service, repository, storage, owner):
        document = await upload(service, owner)
        storage.failing.add("delete")

        with pytest.raises(DependencyFailureError):
            await service.delete(owner, document.id)

        assert repository.get(document.id) is document

    @pytest.mark.asyncio
    async def test_stranger_cannot_delete(self, service, repository, owner, stranger):
        document = await upload(service, owner)

        with pytest.raises(ForbiddenError):
            await service.delete(stranger, document.id)

        assert repository.get(document.id) is document

    @pytest.mark.asyncio
    async def test_delete_missing_document(self, service, owner):
        with pytest.raises(NotFoundError):
            await service.delete(owner, uuid4())


class TestListing:

    @pytest.mark.asyncio
    async def test_list_own_documents(self, service, owner, stranger):
        mine = await upload(service, owner)
        await upload(service, stranger)

        assert service.list_for_user(owner) == [mine]

    @pytest.mark.asyncio
    async def test_listing_someone_else_requires_admin(self, service, owner, stranger, admin):
        theirs = await upload(service, stranger)

        with pytest.raises(ForbiddenError):
            service.list_for_user(owner, user_id=stranger.id)
        assert service.list_for_user(admin, user_id=stranger.id) == [theirs]

    @pytest.mark.asyncio
    async def test_admin_listing_with_counts(self, service, owner, stranger, admin):
        pan = await upload(service, owner, "PAN_CARD", "pan.pdf")
        await upload(service, owner, "OFFER_LETTER", "offer.pdf")
        await upload(service, stranger, "PAN_CARD", "pan.pdf")
        service.review(admin, pan.id, "APPROVED")

        listing = service.list_all(admin)
        assert len(listing.documents) == 3
        assert listing.counts == {
            DocumentStatus.PENDING: 2,
            DocumentStatus.APPROVED: 1,
            DocumentStatus.REJECTED: 0,
        }

        pending_pan = service.list_all(
            admin,
            status=DocumentStatus.PENDING,
            document_type=DocumentType.PAN_CARD,
        )
        assert [d.user_id for d in pending_pan.documents] == [stranger.id]

    def test_non_admin_cannot_list_all(self, service, owner):
        with pytest.raises(ForbiddenError):
            service.list_all(owner)
