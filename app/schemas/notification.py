from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    MENTOR_REQUEST_APPROVED = "mentor_request_approved"
    MENTOR_REQUEST_REJECTED = "mentor_request_rejected"
    MENTOR_REQUEST_ADMIN_APPROVED = "mentor_request_admin_approved"
    MENTOR_REQUEST_RECEIVED = "mentor_request_received"


class NotificationResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str

    mentor_id: str | None = None
    mentor_name: str | None = None
    request_id: str | None = None

    read: bool = False
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int


class PushSubscriptionCreate(BaseModel):
    endpoint: str
    p256dh: str
    auth: str
