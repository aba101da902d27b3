"""Pytest fixtures for the onboarding backend.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database (fresh schema per test)
- Users with different roles (USER, ADMIN)
- Fake object storage and a recording notifier
- A FastAPI TestClient wired to all of the above

Usage:
    def test_list_documents(client, user, auth_headers):
        response = client.get("/api/v1/documents", headers=auth_headers(user))
        assert response.status_code == 200
"""

import asyncio
import os
from typing import Dict, Generator, List, Optional
from uuid import UUID

# Set environment variables BEFORE any application imports so the cached
# settings pick them up
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("ADMIN_EMAILS", "hr@test.com")
os.environ.setdefault("APP_BASE_URL", "https://onboarding.test")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from auth.jwt import create_access_token
from database import enable_sqlite_foreign_keys
from domain.documents.ports.object_storage_port import ObjectStoragePort, StorageError
from domain.notifications.ports.notifier_port import NotifierPort
from domain.notifications.ports.user_directory_port import UserDirectoryPort
from models import Base, User


# One connection shared by every session so the in-memory database survives
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeStorage(ObjectStoragePort):
    """In-memory object store.

    Put an operation name ("put", "delete", "head", "presign") into
    ``failing`` to make that operation raise StorageError.
    """

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.deleted: List[str] = []
        self.failing: set = set()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise StorageError(f"simulated {operation} failure")

    async def store_file(self, storage_key: str, content: bytes, content_type: str) -> None:
        self._check("put")
        await asyncio.sleep(0)
        self.objects[storage_key] = content

    async def delete_file(self, storage_key: str) -> bool:
        self._check("delete")
        self.deleted.append(storage_key)
        return self.objects.pop(storage_key, None) is not None

    async def file_exists(self, storage_key: str) -> bool:
        self._check("head")
        return storage_key in self.objects

    async def generate_presigned_url(self, storage_key: str, expires_in_seconds: int = 3600) -> str:
        self._check("presign")
        return f"https://storage.test/{storage_key}?op=get&expires={expires_in_seconds}"

    async def generate_presigned_upload_url(
        self,
        storage_key: str,
        content_type: str,
        expires_in_seconds: int = 3600,
    ) -> str:
        self._check("presign")
        # Yield so concurrent uploads interleave
        await asyncio.sleep(0)
        return f"https://storage.test/{storage_key}?op=put&expires={expires_in_seconds}"

    async def verify_bucket_exists(self) -> bool:
        self._check("head")
        return True


class RecordingNotifier(NotifierPort):
    """Notifier that records calls instead of writing rows or sending mail."""

    def __init__(self):
        self.notifications: List[dict] = []
        self.emails: List[dict] = []
        self.fail = False

    def notify(self, user_id, title, message, notification_type,
               document_id=None, document_type=None, link=None) -> None:
        if self.fail:
            raise RuntimeError("notification backend down")
        self.notifications.append({
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": notification_type,
            "document_id": document_id,
            "document_type": document_type,
            "link": link,
        })

    def send_email(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise RuntimeError("email relay down")
        self.emails.append({"to": to, "subject": subject, "html": html})


class StubUserDirectory(UserDirectoryPort):
    def __init__(self, *users):
        self.users = {u.id: u for u in users}

    def get_user(self, user_id: UUID) -> Optional[object]:
        return self.users.get(user_id)

    def list_admins(self) -> List:
        return [u for u in self.users.values() if u.role == "ADMIN"]


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


def _make_user(db_session: Session, email: str, name: str, role: str) -> User:
    user = User(email=email, name=name, role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def user(db_session: Session) -> User:
    """A new joiner."""
    return _make_user(db_session, "asha@test.com", "Asha Rao", "USER")


@pytest.fixture(scope="function")
def other_user(db_session: Session) -> User:
    return _make_user(db_session, "ravi@test.com", "Ravi Kumar", "USER")


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    """An HR admin (also listed in ADMIN_EMAILS)."""
    return _make_user(db_session, "hr@test.com", "HR Admin", "ADMIN")


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def stub_users():
    """Factory for a StubUserDirectory over the given users."""
    return StubUserDirectory


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user, as the identity provider would."""

    def _headers(user: User) -> Dict[str, str]:
        token = create_access_token(user.email, name=user.name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture(scope="function")
def client(db_session: Session, storage: FakeStorage, notifier: RecordingNotifier):
    """Unauthenticated TestClient sharing the test session, storage and notifier."""
    from main import app
    from database import get_db
    from documents.dependencies import get_notifier, get_storage

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
