"""Request and response shapes for the offline sync endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.pending_change import ChangeType
from app.schemas.conflict import ConflictOut
from app.schemas.user import UserOut


class OfflineChange(BaseModel):
    """One queued client change as received on the wire.

    Fields are loose here. ``parse_change`` validates each item, so a
    malformed item fails on its own instead of rejecting the batch.
    """

    id: str = Field(default="", max_length=100, description="Client-generated change id")
    type: Any = None
    action: Any = None
    data: Any = None
    timestamp: Any = None

    @model_validator(mode="before")
    @classmethod
    def wrap_non_object(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value
        return {"data": value}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()[:100]
        return str(value)[:100]


class SyncRequest(BaseModel):
    model_config = {"populate_by_name": True}

    changes: list[OfflineChange]
    device_id: str = Field(default="unknown", alias="deviceId", max_length=100)
    last_sync: datetime | None = Field(default=None, alias="lastSync")


class SyncItemResult(BaseModel):
    changeId: str
    action: str
    message: str
    examId: int | None = None
    affected: int | None = None
    conflicts: list[ConflictOut] | None = None


class SyncFailure(BaseModel):
    changeId: str
    error: str
    errorType: str
    change: OfflineChange


class SyncConflict(BaseModel):
    changeId: str
    conflicts: list[ConflictOut]


class SyncSummary(BaseModel):
    total: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    conflicts: int = 0


class SyncResult(BaseModel):
    summary: SyncSummary
    successful: list[SyncItemResult] = Field(default_factory=list)
    failed: list[SyncFailure] = Field(default_factory=list)
    conflicts: list[SyncConflict] = Field(default_factory=list)


class SyncResponse(SyncResult):
    success: bool = True
    message: str
    serverTimestamp: datetime


class PendingChangeOut(BaseModel):
    id: int
    change_id: str
    change_type: ChangeType
    change_action: str
    change_data: dict[str, Any]
    user_id: str
    device_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class PendingChangeList(BaseModel):
    success: bool = True
    pendingChanges: list[PendingChangeOut]


class ResolveChangeRequest(BaseModel):
    resolution: str
    modifiedData: dict[str, Any] | None = None


class ResolveChangeResponse(BaseModel):
    success: bool = True
    changeId: str
    resolution: str
    message: str
    result: SyncItemResult | None = None


class QueueStatus(BaseModel):
    hasPendingChanges: bool
    totalPending: int
    examChanges: int
    notificationChanges: int
    oldestChange: datetime | None = None
    newestChange: datetime | None = None


class QueueStatusResponse(BaseModel):
    success: bool = True
    queueStatus: QueueStatus


class Snapshot(BaseModel):
    timestamp: datetime
    version: str
    user: UserOut
    data: dict[str, Any]


class SnapshotResponse(BaseModel):
    success: bool = True
    snapshot: Snapshot
