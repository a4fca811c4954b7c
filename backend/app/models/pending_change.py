from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.exam import utc_now


class ChangeType(str, Enum):
    exam = "exam"
    notification = "notification"


class PendingChange(Base):
    __tablename__ = "offline_pending_changes"
    __table_args__ = (UniqueConstraint("user_id", "change_id", name="uq_offline_pending_changes_user_change"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    change_id: Mapped[str] = mapped_column(String(100), nullable=False)
    change_type: Mapped[ChangeType] = mapped_column(
        SAEnum(ChangeType, name="change_type", native_enum=False, length=20),
        nullable=False,
        index=True,
    )
    change_action: Mapped[str] = mapped_column(String(50), nullable=False)
    # Original mutation data; conflicting creates also carry a "conflicts" list.
    change_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    device_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
