from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from uuid import UUID
from datetime import datetime
from revistete.models.notification import NotificationType
from revistete.schemas.common import Envelope, MessageEnvelope
from revistete.schemas.user import UserSummary


class GarmentSummary(BaseModel):
    id: UUID
    title: str
    photos: List[str] = []

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: UUID
    type: NotificationType
    title: str
    body: str
    related_user_id: Optional[UUID] = None
    related_user: Optional[UserSummary] = None
    related_garment_id: Optional[UUID] = None
    related_garment: Optional[GarmentSummary] = None
    related_conversation_id: Optional[UUID] = None
    is_read: bool
    read_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="extra_data")
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(Envelope):
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationEnvelope(Envelope):
    notification: NotificationResponse


class MarkAllReadResponse(MessageEnvelope):
    modified_count: int


class UnreadCountResponse(Envelope):
    unread_count: int
