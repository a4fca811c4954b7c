"""Per-user store of offline changes parked until a human resolves them."""

from __future__ import annotations

import logging

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.exam import utc_now
from app.models.pending_change import ChangeType, PendingChange
from app.schemas.sync import QueueStatus

logger = logging.getLogger(__name__)


def _find(db: Session, *, change_id: str, user_id: str) -> PendingChange | None:
    return db.execute(
        select(PendingChange).where(
            PendingChange.change_id == change_id,
            PendingChange.user_id == user_id,
        )
    ).scalar_one_or_none()


def save_pending_change(
    db: Session,
    *,
    change_id: str,
    change_type: ChangeType,
    change_action: str,
    change_data: dict,
    user_id: str,
    device_id: str | None,
) -> PendingChange:
    # Saving the same change id again replaces the earlier record.
    record = _find(db, change_id=change_id, user_id=user_id)
    if record is None:
        record = PendingChange(change_id=change_id, user_id=user_id)
        db.add(record)
    else:
        logger.debug("Replacing pending change %s for user %s", change_id, user_id)
    record.change_type = change_type
    record.change_action = change_action
    record.change_data = change_data
    record.device_id = device_id
    record.created_at = utc_now()
    db.flush()
    return record


def list_pending_changes(db: Session, *, user_id: str) -> list[PendingChange]:
    query = (
        select(PendingChange)
        .where(PendingChange.user_id == user_id)
        .order_by(PendingChange.created_at.desc(), PendingChange.id.desc())
    )
    return list(db.execute(query).scalars())


def get_pending_change(db: Session, *, change_id: str, user_id: str) -> PendingChange:
    record = _find(db, change_id=change_id, user_id=user_id)
    if record is None:
        raise ResourceNotFoundError("Pending change", change_id)
    return record


def delete_pending_change(db: Session, *, change_id: str, user_id: str) -> bool:
    record = _find(db, change_id=change_id, user_id=user_id)
    if record is None:
        return False
    db.delete(record)
    db.flush()
    return True


def pending_queue_status(db: Session, *, user_id: str) -> QueueStatus:
    row = db.execute(
        select(
            func.count(PendingChange.id),
            func.sum(case((PendingChange.change_type == ChangeType.exam, 1), else_=0)),
            func.sum(case((PendingChange.change_type == ChangeType.notification, 1), else_=0)),
            func.min(PendingChange.created_at),
            func.max(PendingChange.created_at),
        ).where(PendingChange.user_id == user_id)
    ).one()
    total, exam_changes, notification_changes, oldest, newest = row
    total = total or 0
    return QueueStatus(
        hasPendingChanges=total > 0,
        totalPending=total,
        examChanges=exam_changes or 0,
        notificationChanges=notification_changes or 0,
        oldestChange=oldest,
        newestChange=newest,
    )
