"""
Reconciliation of change batches queued by a client while it was offline.

Each queued change is parsed into one of a closed set of commands, one per
legal (type, action) pair, and applied in the order the client supplied.
Items are isolated: every item commits or rolls back on its own, and a
failure is recorded against that item without stopping the batch.

Exam creates are checked against the upcoming bookings of their date. A
colliding create is not committed; it is parked in the pending change store
and reported as ``pending_resolution`` until a human accepts, modifies or
rejects it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Callable, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import AppError, UnknownActionError, UnknownChangeTypeError, ValidationError
from app.models.exam import Exam
from app.models.notification import NotificationType
from app.models.pending_change import ChangeType
from app.models.user import User
from app.schemas.exam import ExamChangeRef, ExamCreate, ExamUpdate
from app.schemas.sync import (
    OfflineChange,
    SyncConflict,
    SyncFailure,
    SyncItemResult,
    SyncResult,
    SyncSummary,
)
from app.services import exams as exam_service
from app.services.audit import log_activity
from app.services.conflict_service import detect_conflicts
from app.services.notifications import create_notification, delete_notification, mark_notification_read
from app.services.pending_changes import save_pending_change

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Internal error while applying change"


@dataclass(frozen=True)
class CreateExam:
    change_id: str
    payload: ExamCreate


@dataclass(frozen=True)
class UpdateExam:
    change_id: str
    exam_id: int
    payload: ExamUpdate


@dataclass(frozen=True)
class DeleteExam:
    change_id: str
    exam_id: int


@dataclass(frozen=True)
class MarkNotificationRead:
    change_id: str
    notification_id: str


@dataclass(frozen=True)
class DeleteNotification:
    change_id: str
    notification_id: str


ChangeCommand = Union[CreateExam, UpdateExam, DeleteExam, MarkNotificationRead, DeleteNotification]


def _field_error(field: str, message: str) -> ValidationError:
    return ValidationError("Validation failed", details={"errors": [{"field": field, "message": message}]})


def _validate(model: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise ValidationError("Validation failed", details={"errors": errors}) from exc


def _notification_id(data: dict[str, Any]) -> str:
    value = data.get("id")
    if value is None or str(value).strip() == "":
        raise _field_error("id", "id is required")
    return str(value)


def _parse_exam_create(change_id: str, data: dict[str, Any]) -> ChangeCommand:
    return CreateExam(change_id=change_id, payload=_validate(ExamCreate, data))


def _parse_exam_update(change_id: str, data: dict[str, Any]) -> ChangeCommand:
    ref = _validate(ExamChangeRef, data)
    fields = {key: value for key, value in data.items() if key != "id"}
    return UpdateExam(change_id=change_id, exam_id=ref.id, payload=_validate(ExamUpdate, fields))


def _parse_exam_delete(change_id: str, data: dict[str, Any]) -> ChangeCommand:
    return DeleteExam(change_id=change_id, exam_id=_validate(ExamChangeRef, data).id)


def _parse_notification_read(change_id: str, data: dict[str, Any]) -> ChangeCommand:
    return MarkNotificationRead(change_id=change_id, notification_id=_notification_id(data))


def _parse_notification_delete(change_id: str, data: dict[str, Any]) -> ChangeCommand:
    return DeleteNotification(change_id=change_id, notification_id=_notification_id(data))


COMMAND_PARSERS: dict[str, dict[str, Callable[[str, dict[str, Any]], ChangeCommand]]] = {
    ChangeType.exam.value: {
        "create": _parse_exam_create,
        "update": _parse_exam_update,
        "delete": _parse_exam_delete,
    },
    ChangeType.notification.value: {
        "mark_read": _parse_notification_read,
        "delete": _parse_notification_delete,
    },
}


def parse_change(change: OfflineChange) -> ChangeCommand:
    if not change.id:
        raise _field_error("id", "id is required")
    actions = COMMAND_PARSERS.get(change.type) if isinstance(change.type, str) else None
    if actions is None:
        raise UnknownChangeTypeError(change.type)
    parser = actions.get(change.action) if isinstance(change.action, str) else None
    if parser is None:
        raise UnknownActionError(change.type, change.action)
    if not isinstance(change.data, dict):
        raise _field_error("data", "data must be an object")
    return parser(change.id, change.data)


def lock_date(db: Session, command: ChangeCommand) -> date | None:
    """Exam date whose bookings must not change between the conflict read and the write."""
    if isinstance(command, CreateExam):
        return command.payload.date
    if isinstance(command, UpdateExam) and get_settings().recheck_conflicts_on_update:
        if command.payload.date is not None:
            return command.payload.date
        exam = db.get(Exam, command.exam_id)
        return exam.date if exam is not None else None
    return None


def pending_payload(command: CreateExam, conflicts: list[dict]) -> dict[str, Any]:
    data = command.payload.model_dump(mode="json")
    data["conflicts"] = conflicts
    return data


def apply_change(
    db: Session,
    command: ChangeCommand,
    *,
    actor: User,
    device_id: str | None,
    check_conflicts: bool = True,
) -> SyncItemResult:
    """Apply one command inside the caller's transaction. The caller commits."""
    if isinstance(command, CreateExam):
        exam_service.ensure_can_create(actor)
        if check_conflicts:
            conflicts = detect_conflicts(command.payload, exam_service.upcoming_exams_on(db, command.payload.date))
            if conflicts:
                schemas = [item.to_schema() for item in conflicts]
                save_pending_change(
                    db,
                    change_id=command.change_id,
                    change_type=ChangeType.exam,
                    change_action="create",
                    change_data=pending_payload(command, [item.model_dump() for item in schemas]),
                    user_id=actor.id,
                    device_id=device_id,
                )
                return SyncItemResult(
                    changeId=command.change_id,
                    action="pending_resolution",
                    message="Exam creation pending conflict resolution",
                    conflicts=schemas,
                )
        exam = exam_service.create_exam(db, command.payload, owner=actor)
        return SyncItemResult(
            changeId=command.change_id,
            action="created",
            examId=exam.id,
            message="Exam created successfully",
        )

    if isinstance(command, UpdateExam):
        exam = exam_service.get_exam(db, command.exam_id)
        exam_service.ensure_can_modify(actor, exam, verb="edit")
        exam_service.update_exam(
            db,
            exam,
            command.payload,
            recheck_conflicts=get_settings().recheck_conflicts_on_update,
        )
        return SyncItemResult(
            changeId=command.change_id,
            action="updated",
            examId=exam.id,
            message="Exam updated successfully",
        )

    if isinstance(command, DeleteExam):
        exam = exam_service.get_exam(db, command.exam_id)
        exam_service.ensure_can_modify(actor, exam, verb="delete")
        exam_service.delete_exam(db, exam)
        return SyncItemResult(
            changeId=command.change_id,
            action="deleted",
            examId=command.exam_id,
            message="Exam deleted successfully",
        )

    if isinstance(command, MarkNotificationRead):
        affected = mark_notification_read(db, notification_id=command.notification_id, user_id=actor.id)
        return SyncItemResult(
            changeId=command.change_id,
            action="marked_read",
            affected=affected,
            message="Notification marked as read",
        )

    if isinstance(command, DeleteNotification):
        affected = delete_notification(db, notification_id=command.notification_id, user_id=actor.id)
        return SyncItemResult(
            changeId=command.change_id,
            action="deleted",
            affected=affected,
            message="Notification deleted",
        )

    raise TypeError(f"Unhandled change command: {type(command).__name__}")


def summary_message(summary: SyncSummary) -> str:
    return f"Offline sync completed: {summary.successful} successful, {summary.failed} failed"


def apply_batch(
    db: Session,
    changes: list[OfflineChange],
    *,
    actor: User,
    device_id: str | None,
) -> SyncResult:
    result = SyncResult(summary=SyncSummary(total=len(changes)))
    actor_id = actor.id

    for change in changes:
        try:
            command = parse_change(change)
            with exam_service.booking_guard(db, lock_date(db, command)):
                item = apply_change(db, command, actor=actor, device_id=device_id)
                db.commit()
        except AppError as exc:
            db.rollback()
            logger.warning("Offline change %s from user %s failed: %s", change.id, actor_id, exc.message)
            result.failed.append(
                SyncFailure(changeId=change.id, error=exc.message, errorType=type(exc).__name__, change=change)
            )
            result.summary.failed += 1
        except Exception:
            db.rollback()
            logger.exception("Unexpected error applying offline change %s from user %s", change.id, actor_id)
            result.failed.append(
                SyncFailure(
                    changeId=change.id,
                    error=GENERIC_FAILURE_MESSAGE,
                    errorType="InternalError",
                    change=change,
                )
            )
            result.summary.failed += 1
        else:
            result.successful.append(item)
            result.summary.successful += 1
            if item.action == "pending_resolution":
                result.conflicts.append(SyncConflict(changeId=item.changeId, conflicts=item.conflicts or []))
                result.summary.conflicts += 1
        result.summary.processed += 1

    message = summary_message(result.summary)
    create_notification(
        db,
        user_id=actor_id,
        title="Offline sync",
        message=message,
        notification_type=NotificationType.sync,
    )
    log_activity(
        db,
        user=actor,
        action="offline_sync.batch",
        entity_type="offline_sync",
        details={"device_id": device_id, **result.summary.model_dump()},
    )
    db.commit()
    logger.info("%s (user=%s, device=%s, conflicts=%d)", message, actor_id, device_id, result.summary.conflicts)
    return result
