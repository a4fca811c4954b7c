from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.models.user import User

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    *,
    user: User | None,
    action: str,
    entity_type: str | None = None,
    entity_id: str | int | None = None,
    details: dict | None = None,
) -> ActivityLog:
    """Stage an activity record in the caller's transaction; it persists only if the caller commits."""
    record = ActivityLog(
        user_id=user.id if user is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details or {},
    )
    db.add(record)
    logger.debug("Activity %s on %s %s by %s", action, entity_type, record.entity_id, record.user_id)
    return record
