"""User provisioning and profile management.

Users are never created through an admin form. A row appears the first time
someone presents a valid identity token, and emails listed in ADMIN_EMAILS
are promoted to ADMIN on every sign-in.
"""

import logging
import time
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth.roles import UserRole, is_admin
from config import get_settings
from domain.documents.ports.object_storage_port import ObjectStoragePort, StorageError
from domain.documents.validation import sanitize_filename
from domain.errors import DependencyFailureError, ForbiddenError, NotFoundError, ValidationError
from domain.notifications.ports.user_directory_port import UserDirectoryPort
from models.user import OnboardingStatus, User
from observability.metrics import side_effect_failures_total

logger = logging.getLogger(__name__)

# Fields a user may edit on their own profile; admins may edit the same set
PROFILE_FIELDS = (
    "name",
    "phone",
    "address",
    "blood_group",
    "linkedin_profile",
    "slack_user_id",
    "team_bio",
)


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()


def get_or_provision_user(db: Session, email: str, name: Optional[str] = None) -> User:
    """Return the user for a verified email, creating it on first sign-in.

    Raises:
        ValueError: If the email is malformed
    """
    email = email.strip().lower()
    should_be_admin = email in get_settings().admin_emails

    user = _find_by_email(db, email)
    if user is None:
        user = User(
            email=email,
            name=name,
            role=UserRole.ADMIN.value if should_be_admin else UserRole.USER.value,
            onboarding_status=OnboardingStatus.IN_PROGRESS.value,
            tour_completed=False,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # A parallel first request provisioned the same email
            db.rollback()
            user = _find_by_email(db, email)
            if user is None:
                raise
        else:
            logger.info(f"Provisioned user on first sign-in: user_id={user.id}, role={user.role}")
            return user

    if should_be_admin and user.role != UserRole.ADMIN.value:
        user.role = UserRole.ADMIN.value
        db.commit()
        logger.info(f"Promoted user to ADMIN from ADMIN_EMAILS: user_id={user.id}")

    return user


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def list_onboarding_users(db: Session) -> List[User]:
    """All non-admin users, newest first."""
    return list(db.execute(
        select(User)
        .where(User.role == UserRole.USER.value)
        .order_by(User.created_at.desc())
    ).scalars())


def update_profile(db: Session, user: User, changes: Dict[str, Any]) -> User:
    """Apply profile edits. Keys outside PROFILE_FIELDS are ignored."""
    applied = []
    for field, value in changes.items():
        if field not in PROFILE_FIELDS:
            continue
        setattr(user, field, value.value if hasattr(value, "value") else value)
        applied.append(field)

    if applied:
        db.commit()
        db.refresh(user)
        logger.info(f"Updated profile: user_id={user.id}, fields={applied}")
    return user


def set_onboarding_status(db: Session, user_id: UUID, onboarding_status: OnboardingStatus) -> User:
    user = get_user_or_404(db, user_id)
    user.onboarding_status = OnboardingStatus(onboarding_status).value
    db.commit()
    db.refresh(user)
    logger.info(f"Onboarding status changed: user_id={user_id}, status={user.onboarding_status}")
    return user


def mark_tour_completed(db: Session, user: User, completed: bool = True) -> User:
    user.tour_completed = completed
    db.commit()
    db.refresh(user)
    return user


async def replace_team_image(
    db: Session,
    storage: ObjectStoragePort,
    user: User,
    file_name: str,
    content: bytes,
    content_type: str,
) -> User:
    """Store a new team directory photo and point the profile at it.

    The previous photo is deleted after the profile is saved. A failed
    delete is logged and counted but does not fail the request.

    Raises:
        ValidationError: If the file is empty or not an image
        DependencyFailureError: If the object store rejects the write
    """
    if not (content_type or "").startswith("image/"):
        raise ValidationError(f"Team image must be an image, got '{content_type}'")
    if not content:
        raise ValidationError("File is empty")

    storage_key = f"team-images/{user.id}/{int(time.time() * 1000)}_{sanitize_filename(file_name or 'photo')}"
    try:
        await storage.store_file(storage_key, content, content_type)
    except StorageError as e:
        raise DependencyFailureError(f"Could not store team image: {e}")

    previous_key = user.team_image_key
    user.team_image_key = storage_key
    db.commit()
    db.refresh(user)
    logger.info(f"Team image replaced: user_id={user.id}, storage_key={storage_key}")

    if previous_key and previous_key != storage_key:
        try:
            await storage.delete_file(previous_key)
        except Exception as e:
            side_effect_failures_total.labels(effect="object_cleanup").inc()
            logger.error(f"Failed to delete previous team image: storage_key={previous_key}, error={e}")
    return user


async def get_team_image_url(db: Session, storage: ObjectStoragePort, caller: User, user_id: UUID) -> str:
    """Presigned GET for a user's team photo. Only the user and admins may ask."""
    if caller.id != user_id and not is_admin(caller):
        raise ForbiddenError("You can only view your own team image")

    user = get_user_or_404(db, user_id)
    if not user.team_image_key:
        raise NotFoundError("No team image uploaded")
    return await sign_team_image(storage, user.team_image_key)


async def sign_team_image(storage: ObjectStoragePort, storage_key: str) -> str:
    try:
        return await storage.generate_presigned_url(
            storage_key,
            expires_in_seconds=get_settings().DOWNLOAD_URL_TTL_SECONDS,
        )
    except StorageError as e:
        raise DependencyFailureError(f"Could not sign team image URL: {e}")


class SqlAlchemyUserDirectory(UserDirectoryPort):
    """User lookups for notification fan-out."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def list_admins(self) -> List[User]:
        return list(self.db.execute(
            select(User).where(User.role == UserRole.ADMIN.value)
        ).scalars())
