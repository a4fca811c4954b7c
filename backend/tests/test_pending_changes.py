import pytest

from app.core.exceptions import ResourceNotFoundError
from app.models.pending_change import ChangeType
from app.models.user import UserRole
from app.services.pending_changes import (
    delete_pending_change,
    get_pending_change,
    list_pending_changes,
    pending_queue_status,
    save_pending_change,
)


def _save(db, user, change_id: str, *, change_type: ChangeType = ChangeType.exam, data: dict | None = None):
    record = save_pending_change(
        db,
        change_id=change_id,
        change_type=change_type,
        change_action="create",
        change_data=data or {"courseCode": "CS101"},
        user_id=user.id,
        device_id="tablet-1",
    )
    db.commit()
    return record


def test_saving_same_change_id_replaces_record(db, make_user):
    user = make_user(UserRole.lecturer)
    _save(db, user, "c-1", data={"courseCode": "CS101"})
    _save(db, user, "c-1", data={"courseCode": "CS202"})

    records = list_pending_changes(db, user_id=user.id)

    assert len(records) == 1
    assert records[0].change_data == {"courseCode": "CS202"}


def test_pending_changes_are_scoped_per_user(db, make_user):
    owner = make_user(UserRole.lecturer)
    other = make_user(UserRole.lecturer)
    _save(db, owner, "c-1")
    _save(db, other, "c-1")

    assert len(list_pending_changes(db, user_id=owner.id)) == 1
    assert len(list_pending_changes(db, user_id=other.id)) == 1

    with pytest.raises(ResourceNotFoundError):
        get_pending_change(db, change_id="c-2", user_id=owner.id)


def test_delete_pending_change_reports_whether_a_record_existed(db, make_user):
    user = make_user(UserRole.lecturer)
    _save(db, user, "c-1")

    assert delete_pending_change(db, change_id="c-1", user_id=user.id) is True
    assert delete_pending_change(db, change_id="c-1", user_id=user.id) is False
    assert list_pending_changes(db, user_id=user.id) == []


def test_queue_status_counts_by_type(db, make_user):
    user = make_user(UserRole.lecturer)

    empty = pending_queue_status(db, user_id=user.id)
    assert empty.hasPendingChanges is False
    assert empty.totalPending == 0
    assert empty.oldestChange is None

    _save(db, user, "c-1")
    _save(db, user, "c-2")
    _save(db, user, "n-1", change_type=ChangeType.notification)

    status = pending_queue_status(db, user_id=user.id)
    assert status.hasPendingChanges is True
    assert status.totalPending == 3
    assert status.examChanges == 2
    assert status.notificationChanges == 1
    assert status.oldestChange <= status.newestChange
