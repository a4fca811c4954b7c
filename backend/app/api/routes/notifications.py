from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_lecturer_or_admin
from app.core.exceptions import ResourceNotFoundError
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.schemas.notification import NotificationCreate, NotificationOut
from app.services.audit import log_activity
from app.services.notifications import create_notification, delete_notification, mark_notification_read

router = APIRouter()


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    notification_type: NotificationType | None = Query(default=None),
    is_read: bool | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[NotificationOut]:
    query = (
        select(Notification)
        .where(Notification.user_id == current_user.id)
        .order_by(Notification.created_at.desc())
    )
    if notification_type:
        query = query.where(Notification.notification_type == notification_type)
    if is_read is not None:
        query = query.where(Notification.is_read == is_read)
    query = query.offset(offset).limit(limit)
    return list(db.execute(query).scalars())


@router.post("", status_code=status.HTTP_201_CREATED)
def send_notification(
    payload: NotificationCreate,
    current_user: User = Depends(require_lecturer_or_admin),
    db: Session = Depends(get_db),
) -> dict:
    if db.get(User, payload.user_id) is None:
        raise ResourceNotFoundError("User", payload.user_id)
    record = create_notification(
        db,
        user_id=payload.user_id,
        title=payload.title,
        message=payload.message,
        notification_type=NotificationType(payload.notification_type),
    )
    log_activity(db, user=current_user, action="notification.create", entity_type="notification", entity_id=record.id)
    db.commit()
    return {"success": True, "message": "Notification created successfully", "notificationId": record.id}


@router.post("/read-all")
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.commit()
    return {"updated": result.rowcount or 0}


@router.put("/{notification_id}/read")
@router.post("/{notification_id}/read")
def mark_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    if not mark_notification_read(db, notification_id=notification_id, user_id=current_user.id):
        raise ResourceNotFoundError("Notification", notification_id)
    db.commit()
    return {"success": True, "message": "Notification marked as read"}


@router.delete("/{notification_id}")
def remove_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    if not delete_notification(db, notification_id=notification_id, user_id=current_user.id):
        raise ResourceNotFoundError("Notification", notification_id)
    db.commit()
    return {"success": True, "message": "Notification deleted successfully"}
