from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.notification import NotificationType


class NotificationCreate(BaseModel):
    """Manual notification sent by staff; ``sync`` notifications are created by the reconciler only."""

    model_config = {"populate_by_name": True}

    user_id: str = Field(alias="userId", min_length=1, max_length=36)
    title: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1)
    notification_type: Literal["reminder", "warning", "success", "info"] = Field(default="info", alias="type")

    @field_validator("title", "message")
    @classmethod
    def strip_text(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("must be a non-empty string")
        return trimmed


class NotificationOut(BaseModel):
    id: str
    user_id: str
    user_name: str | None = None
    title: str
    message: str
    notification_type: NotificationType
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
