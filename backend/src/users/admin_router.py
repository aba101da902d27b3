"""User management endpoints (ADMIN only).

Admins cannot create users; rows appear on first sign-in. They can review
a user's profile and documents, correct profile details, mark onboarding
complete, and read the dashboard aggregates.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.dependencies import CurrentAdmin
from database import get_db
from documents.schemas import DocumentResponse
from users import service
from users.dashboard import build_dashboard
from users.schemas import (
    DashboardResponse,
    OnboardingStatusUpdate,
    ProfileUpdate,
    UserDetailResponse,
    UserListResponse,
    UserResponse,
)

router = APIRouter(prefix="/admin", tags=["Admin Users"])


@router.get("/users", response_model=UserListResponse, summary="List onboarding users (ADMIN)")
def list_users(
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
) -> UserListResponse:
    users = service.list_onboarding_users(db)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )


@router.get("/users/{user_id}", response_model=UserDetailResponse, summary="Get a user with documents (ADMIN)")
def get_user(
    user_id: UUID,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
) -> UserDetailResponse:
    user = service.get_user_or_404(db, user_id)
    documents = sorted(user.documents, key=lambda d: d.uploaded_at, reverse=True)
    return UserDetailResponse(
        **UserResponse.model_validate(user).model_dump(),
        documents=[DocumentResponse.model_validate(d) for d in documents],
    )


@router.patch("/users/{user_id}", response_model=UserResponse, summary="Edit a user's profile (ADMIN)")
def update_user(
    user_id: UUID,
    data: ProfileUpdate,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
) -> UserResponse:
    user = service.get_user_or_404(db, user_id)
    user = service.update_profile(db, user, data.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.patch(
    "/users/{user_id}/onboarding-status",
    response_model=UserResponse,
    summary="Set onboarding status (ADMIN)",
)
def update_onboarding_status(
    user_id: UUID,
    data: OnboardingStatusUpdate,
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
) -> UserResponse:
    user = service.set_onboarding_status(db, user_id, data.onboarding_status)
    return UserResponse.model_validate(user)


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard aggregates (ADMIN)")
def dashboard(
    current_user: CurrentAdmin,
    db: Session = Depends(get_db),
) -> DashboardResponse:
    return DashboardResponse.model_validate(build_dashboard(db), from_attributes=True)
