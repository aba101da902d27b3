"""Unit tests for document authorization rules"""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from auth.roles import UserRole, has_permission, is_admin
from domain.documents import policy
from domain.errors import ForbiddenError


@pytest.fixture
def owner():
    return SimpleNamespace(id=uuid4(), role="USER")


@pytest.fixture
def stranger():
    return SimpleNamespace(id=uuid4(), role="USER")


@pytest.fixture
def admin():
    return SimpleNamespace(id=uuid4(), role="ADMIN")


@pytest.fixture
def document(owner):
    return SimpleNamespace(id=uuid4(), user_id=owner.id)


class TestRoles:

    def test_admin_includes_user_permissions(self):
        assert has_permission(UserRole.ADMIN, UserRole.USER) is True
        assert has_permission(UserRole.USER, UserRole.ADMIN) is False

    def test_unknown_role_is_not_admin(self):
        assert is_admin(SimpleNamespace(role="SUPERUSER")) is False


class TestDocumentPolicy:

    def test_owner_access(self, owner, document):
        assert policy.can_access(owner, document) is True
        assert policy.can_delete(owner, document) is True
        assert policy.can_review(owner) is False

    def test_admin_access(self, admin, document):
        assert policy.can_access(admin, document) is True
        assert policy.can_delete(admin, document) is True
        assert policy.can_review(admin) is True
        assert policy.can_list_all(admin) is True

    def test_stranger_access(self, stranger, document):
        assert policy.can_access(stranger, document) is False
        assert policy.can_delete(stranger, document) is False

    def test_upload_only_for_self(self, owner, admin):
        assert policy.can_upload(owner, owner.id) is True
        # Admins upload their own documents only
        assert policy.can_upload(admin, owner.id) is False

    @pytest.mark.parametrize("check,args", [
        ("ensure_can_access", ("document",)),
        ("ensure_can_delete", ("document",)),
        ("ensure_can_review", ()),
        ("ensure_can_list_all", ()),
    ])
    def test_ensure_raises_forbidden(self, stranger, document, check, args):
        values = {"document": document}
        with pytest.raises(ForbiddenError):
            getattr(policy, check)(stranger, *(values[a] for a in args))

    def test_ensure_passes_silently(self, admin, document):
        policy.ensure_can_access(admin, document)
        policy.ensure_can_review(admin)
