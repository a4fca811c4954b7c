from __future__ import annotations

import logging

from sqlalchemy import delete, update
from sqlalchemy.orm import Session

from app.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    user_id: str,
    title: str,
    message: str,
    notification_type: NotificationType = NotificationType.info,
) -> Notification:
    record = Notification(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=notification_type,
    )
    db.add(record)
    db.flush()
    logger.debug("Created %s notification %s for user %s", notification_type.value, record.id, user_id)
    return record


def mark_notification_read(db: Session, *, notification_id: str, user_id: str) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.id == notification_id, Notification.user_id == user_id)
        .values(is_read=True)
    )
    return result.rowcount or 0


def delete_notification(db: Session, *, notification_id: str, user_id: str) -> int:
    result = db.execute(
        delete(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    return result.rowcount or 0
