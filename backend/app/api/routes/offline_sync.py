from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.sync import (
    PendingChangeList,
    QueueStatusResponse,
    ResolveChangeRequest,
    ResolveChangeResponse,
    SnapshotResponse,
    SyncRequest,
    SyncResponse,
)
from app.services.offline_sync import apply_batch, summary_message
from app.services.pending_changes import list_pending_changes, pending_queue_status
from app.services.resolution import resolve_pending_change
from app.services.snapshot import build_snapshot

router = APIRouter()


@router.get("/snapshot", response_model=SnapshotResponse)
def get_snapshot(
    include_exams: bool = Query(default=True, alias="includeExams"),
    include_notifications: bool = Query(default=True, alias="includeNotifications"),
    last_sync: datetime | None = Query(default=None, alias="lastSync"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SnapshotResponse:
    snapshot = build_snapshot(
        db,
        user=current_user,
        include_exams=include_exams,
        include_notifications=include_notifications,
        last_sync=last_sync,
    )
    return SnapshotResponse(snapshot=snapshot)


@router.post("/sync", response_model=SyncResponse)
def sync_changes(
    payload: SyncRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SyncResponse:
    max_batch = get_settings().sync_max_batch_size
    if len(payload.changes) > max_batch:
        raise ValidationError(
            f"A sync batch may contain at most {max_batch} changes",
            details={"received": len(payload.changes), "max": max_batch},
        )

    result = apply_batch(db, payload.changes, actor=current_user, device_id=payload.device_id)
    return SyncResponse(
        message=summary_message(result.summary),
        serverTimestamp=datetime.now(timezone.utc),
        **result.model_dump(),
    )


@router.get("/pending-changes", response_model=PendingChangeList)
def get_pending_changes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PendingChangeList:
    return PendingChangeList(pendingChanges=list_pending_changes(db, user_id=current_user.id))


@router.post("/resolve-change/{change_id}", response_model=ResolveChangeResponse)
def resolve_change(
    change_id: str,
    payload: ResolveChangeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ResolveChangeResponse:
    return resolve_pending_change(
        db,
        change_id=change_id,
        user=current_user,
        resolution=payload.resolution,
        modified_data=payload.modifiedData,
    )


@router.get("/queue-status", response_model=QueueStatusResponse)
def get_queue_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> QueueStatusResponse:
    return QueueStatusResponse(queueStatus=pending_queue_status(db, user_id=current_user.id))
