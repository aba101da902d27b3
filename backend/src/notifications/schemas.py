"""Notification API schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    id: UUID
    title: str
    message: str
    type: str = Field(..., description="document_uploaded | document_approved | document_rejected")
    document_id: Optional[UUID] = Field(None, description="NULL once the document has been deleted")
    document_type: Optional[str] = None
    related_link: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    total_count: int


class MarkAllReadResponse(BaseModel):
    updated: int = Field(..., description="Number of notifications marked read")
