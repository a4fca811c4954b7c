from __future__ import annotations

from datetime import datetime, timezone
import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.exam import Exam
from app.models.notification import Notification
from app.models.user import User
from app.schemas.exam import ExamOut
from app.schemas.notification import NotificationOut
from app.schemas.sync import Snapshot
from app.schemas.user import UserOut

DEFAULT_USER_PREFERENCES = {
    "theme": "light",
    "notifications": True,
    "autoSync": True,
    "offlineMode": False,
}


def fingerprint(serialized: str) -> str:
    """Cheap rolling hash used by clients to spot a stale snapshot. Not for integrity checks."""
    value = 0
    for byte in serialized.encode("utf-8"):
        value = (value * 31 + byte) % 2**32
    return format(value, "x")


def serialize_snapshot_data(data: dict) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_snapshot(
    db: Session,
    *,
    user: User,
    include_exams: bool = True,
    include_notifications: bool = True,
    last_sync: datetime | None = None,
) -> Snapshot:
    settings = get_settings()
    since = _as_utc(last_sync) if last_sync is not None else None
    data: dict = {}

    if include_exams:
        query = select(Exam).order_by(Exam.updated_at.desc(), Exam.id.desc())
        if since is not None:
            query = query.where(Exam.updated_at > since)
        data["exams"] = [
            ExamOut.model_validate(exam).model_dump(mode="json") for exam in db.execute(query).scalars()
        ]

    if include_notifications:
        query = select(Notification).where(Notification.user_id == user.id)
        if since is not None:
            query = query.where(Notification.created_at > since)
        query = query.order_by(Notification.created_at.desc()).limit(settings.snapshot_notification_limit)
        data["notifications"] = [
            NotificationOut.model_validate(item).model_dump(mode="json") for item in db.execute(query).scalars()
        ]

    data["userPreferences"] = dict(DEFAULT_USER_PREFERENCES)

    return Snapshot(
        timestamp=datetime.now(timezone.utc),
        version=fingerprint(serialize_snapshot_data(data)),
        user=UserOut.model_validate(user),
        data=data,
    )
