from __future__ import annotations

from enum import Enum
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.sync import OfflineChange, ResolveChangeResponse, SyncItemResult
from app.services import exams as exam_service
from app.services.audit import log_activity
from app.services.offline_sync import apply_change, lock_date, parse_change
from app.services.pending_changes import delete_pending_change, get_pending_change

logger = logging.getLogger(__name__)


class Resolution(str, Enum):
    accept = "accept"
    modify = "modify"
    reject = "reject"

    @classmethod
    def parse(cls, value: str | None) -> "Resolution":
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            logger.warning("Unrecognized resolution %r treated as reject", value)
            return cls.reject


def _original_data(change_data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in change_data.items() if key != "conflicts"}


def resolve_pending_change(
    db: Session,
    *,
    change_id: str,
    user: User,
    resolution: str | None,
    modified_data: dict[str, Any] | None = None,
) -> ResolveChangeResponse:
    """Act on a parked change and drop it from the pending store.

    ``accept`` replays the original mutation and ``modify`` replays
    ``modified_data`` instead; neither re-runs conflict detection, since the
    collision has been explicitly accepted. Anything else rejects. If the
    replay fails the pending record is kept.
    """
    pending = get_pending_change(db, change_id=change_id, user_id=user.id)
    decision = Resolution.parse(resolution)

    if decision is Resolution.modify and modified_data is None:
        raise ValidationError("modifiedData is required when resolution is 'modify'")

    result: SyncItemResult | None = None
    change_type = pending.change_type.value
    change_action = pending.change_action
    device_id = pending.device_id
    try:
        if decision is Resolution.reject:
            delete_pending_change(db, change_id=change_id, user_id=user.id)
            log_activity(
                db,
                user=user,
                action="offline_sync.resolve",
                entity_type="pending_change",
                entity_id=change_id,
                details={"resolution": decision.value, "requested": resolution},
            )
            db.commit()
        else:
            data = _original_data(pending.change_data) if decision is Resolution.accept else modified_data
            command = parse_change(
                OfflineChange(id=change_id, type=change_type, action=change_action, data=data)
            )
            with exam_service.booking_guard(db, lock_date(db, command)):
                result = apply_change(db, command, actor=user, device_id=device_id, check_conflicts=False)
                delete_pending_change(db, change_id=change_id, user_id=user.id)
                log_activity(
                    db,
                    user=user,
                    action="offline_sync.resolve",
                    entity_type="pending_change",
                    entity_id=change_id,
                    details={"resolution": decision.value, "result": result.action},
                )
                db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Pending change %s for user %s resolved with %s", change_id, user.id, decision.value)
    return ResolveChangeResponse(
        changeId=change_id,
        resolution=decision.value,
        message=f"Change {change_id} resolved with {decision.value}",
        result=result,
    )
