import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.exam import utc_now


class NotificationType(str, Enum):
    reminder = "reminder"
    warning = "warning"
    success = "success"
    info = "info"
    sync = "sync"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    notification_type: Mapped[NotificationType] = mapped_column(
        SAEnum(NotificationType, name="notification_type"),
        nullable=False,
        default=NotificationType.info,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    # No FK on user_id; the recipient is joined for display only.
    recipient = relationship(
        "User",
        primaryjoin="foreign(Notification.user_id) == User.id",
        lazy="joined",
        viewonly=True,
    )

    @property
    def user_name(self) -> str | None:
        return self.recipient.full_name if self.recipient is not None else None
