"""Profile endpoints for the signed-in user, plus team directory photos."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from auth.dependencies import CurrentUser
from config import get_settings
from database import get_db
from documents.dependencies import get_storage
from documents.router import read_upload_within_limit
from domain.documents.ports.object_storage_port import ObjectStoragePort
from users import service
from users.schemas import (
    ProfileUpdate,
    TeamImageUploadResponse,
    TeamImageUrlResponse,
    TourCompletionRequest,
    TourStatusResponse,
    UserResponse,
)

router = APIRouter(prefix="/users/me", tags=["Profile"])
team_images_router = APIRouter(prefix="/users", tags=["Team Images"])


@router.get("", response_model=UserResponse, summary="Get my profile")
def get_me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.patch("", response_model=UserResponse, summary="Update my profile")
def update_me(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> UserResponse:
    user = service.update_profile(db, current_user, data.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.get("/tour-status", response_model=TourStatusResponse, summary="Has the product tour been completed")
def get_tour_status(current_user: CurrentUser) -> TourStatusResponse:
    return TourStatusResponse(tour_completed=bool(current_user.tour_completed))


@router.patch("/tour-completion", response_model=TourStatusResponse, summary="Record product tour completion")
def complete_tour(
    current_user: CurrentUser,
    data: TourCompletionRequest = TourCompletionRequest(),
    db: Session = Depends(get_db),
) -> TourStatusResponse:
    user = service.mark_tour_completed(db, current_user, data.completed)
    return TourStatusResponse(tour_completed=user.tour_completed)


@router.post(
    "/team-image",
    response_model=TeamImageUploadResponse,
    summary="Upload my team directory photo",
    description="Replaces any earlier photo. Images only.",
)
async def upload_team_image(
    current_user: CurrentUser,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ObjectStoragePort = Depends(get_storage),
) -> TeamImageUploadResponse:
    content = await read_upload_within_limit(file, get_settings().TEAM_IMAGE_MAX_SIZE_BYTES)
    user = await service.replace_team_image(
        db,
        storage,
        current_user,
        file_name=file.filename or "",
        content=content,
        content_type=file.content_type or "",
    )
    url = await service.sign_team_image(storage, user.team_image_key)
    return TeamImageUploadResponse(
        **UserResponse.model_validate(user).model_dump(),
        team_image_url=url,
    )


@team_images_router.get(
    "/{user_id}/team-image",
    response_model=TeamImageUrlResponse,
    summary="Get a presigned URL for a user's team photo",
    description="Available to the user themselves and to admins.",
)
async def get_team_image(
    user_id: UUID,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
    storage: ObjectStoragePort = Depends(get_storage),
) -> TeamImageUrlResponse:
    url = await service.get_team_image_url(db, storage, current_user, user_id)
    return TeamImageUrlResponse(url=url)
