"""Pydantic schemas for profile and admin user endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from documents.schemas import DocumentResponse
from domain.documents.document_type import DocumentType
from models.user import BloodGroup, OnboardingStatus


class UserResponse(BaseModel):
    """Response schema for user data."""
    id: UUID = Field(..., description="User's unique identifier")
    email: str = Field(..., description="Verified email address")
    name: Optional[str] = Field(None, description="Display name")
    role: str = Field(..., description="USER or ADMIN")
    onboarding_status: OnboardingStatus
    phone: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    linkedin_profile: Optional[str] = None
    slack_user_id: Optional[str] = None
    team_bio: Optional[str] = None
    team_image_key: Optional[str] = None
    tour_completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Request schema for PATCH /users/me and PATCH /admin/users/{id}.

    All fields are optional; only the ones sent are changed.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200, examples=["Asha Rao"])
    phone: Optional[str] = Field(None, max_length=32, examples=["+91 98765 43210"])
    address: Optional[str] = Field(None, max_length=500)
    blood_group: Optional[BloodGroup] = Field(None, examples=["O+"])
    linkedin_profile: Optional[str] = Field(None, max_length=300)
    slack_user_id: Optional[str] = Field(None, max_length=64)
    team_bio: Optional[str] = Field(None, max_length=2000)

    @field_validator('name')
    @classmethod
    def check_not_empty(cls, v):
        """Ensure name is not a blank string if provided."""
        if v is not None and v.strip() == "":
            raise ValueError("Field cannot be empty string")
        return v


class TeamImageUploadResponse(UserResponse):
    team_image_url: str = Field(..., description="Presigned GET for the new photo")


class TeamImageUrlResponse(BaseModel):
    url: str


class OnboardingStatusUpdate(BaseModel):
    onboarding_status: OnboardingStatus


class TourStatusResponse(BaseModel):
    tour_completed: bool


class TourCompletionRequest(BaseModel):
    completed: bool = True


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int


class UserDetailResponse(UserResponse):
    documents: List[DocumentResponse] = Field(default_factory=list)


class UserStats(BaseModel):
    total_users: int
    new_users_this_week: int
    incomplete_onboarding: int


class DocumentStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


class DocumentTypeCount(BaseModel):
    type: DocumentType
    count: int


class DocumentActivity(BaseModel):
    document: DocumentResponse
    user_name: Optional[str] = None
    user_email: str
    reviewer_name: Optional[str] = None


class RecentUser(BaseModel):
    id: UUID
    name: Optional[str] = None
    email: str
    created_at: datetime
    onboarding_status: OnboardingStatus

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    user_stats: UserStats
    document_stats: DocumentStats
    approval_rate: int = Field(..., description="Approved documents as a whole-number percentage")
    pending_review: int
    documents_by_type: List[DocumentTypeCount]
    recent_document_activity: List[DocumentActivity]
    recent_users: List[RecentUser]
