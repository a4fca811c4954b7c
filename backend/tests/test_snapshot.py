from datetime import date, datetime, timezone

from app.models.exam import Exam
from app.models.notification import Notification
from app.models.user import UserRole
from app.services.snapshot import DEFAULT_USER_PREFERENCES, build_snapshot, fingerprint, serialize_snapshot_data


def test_fingerprint_known_values():
    assert fingerprint("") == "0"
    assert fingerprint("a") == "61"
    assert fingerprint("ab") == "c21"
    assert fingerprint("hello") == "5e918d2"


def test_fingerprint_wraps_to_32_bits():
    value = int(fingerprint("x" * 500), 16)
    assert 0 <= value < 2**32


def test_serialization_is_key_order_independent():
    assert serialize_snapshot_data({"b": 1, "a": [1, 2]}) == serialize_snapshot_data({"a": [1, 2], "b": 1})


def _add_exam(db, owner, code: str, updated_at: datetime) -> Exam:
    exam = Exam(
        course_code=code,
        course_name=f"{code} Final",
        date=date(2024, 12, 15),
        time="09:00",
        venue="Room 101",
        duration=120,
        created_by=owner.id,
        created_at=updated_at,
        updated_at=updated_at,
    )
    db.add(exam)
    db.commit()
    return exam


def test_snapshot_contains_exams_notifications_and_preferences(db, make_user):
    lecturer = make_user(UserRole.lecturer, first_name="Jane", last_name="Smith")
    other = make_user(UserRole.student)
    _add_exam(db, lecturer, "CS101", datetime(2024, 11, 1, tzinfo=timezone.utc))
    db.add(Notification(user_id=lecturer.id, title="Mine", message="visible"))
    db.add(Notification(user_id=other.id, title="Theirs", message="hidden"))
    db.commit()

    snapshot = build_snapshot(db, user=lecturer)

    assert [item["course_code"] for item in snapshot.data["exams"]] == ["CS101"]
    assert snapshot.data["exams"][0]["created_by_name"] == "Jane Smith"
    assert [item["title"] for item in snapshot.data["notifications"]] == ["Mine"]
    assert snapshot.data["userPreferences"] == DEFAULT_USER_PREFERENCES
    assert snapshot.user.id == lecturer.id
    assert snapshot.version == fingerprint(serialize_snapshot_data(snapshot.data))


def test_snapshot_version_is_stable_until_data_changes(db, make_user):
    lecturer = make_user(UserRole.lecturer)
    _add_exam(db, lecturer, "CS101", datetime(2024, 11, 1, tzinfo=timezone.utc))

    first = build_snapshot(db, user=lecturer)
    second = build_snapshot(db, user=lecturer)
    assert first.version == second.version

    _add_exam(db, lecturer, "CS102", datetime(2024, 11, 2, tzinfo=timezone.utc))
    third = build_snapshot(db, user=lecturer)
    assert third.version != first.version


def test_snapshot_last_sync_filters_older_exams(db, make_user):
    lecturer = make_user(UserRole.lecturer)
    _add_exam(db, lecturer, "OLD100", datetime(2024, 10, 1, tzinfo=timezone.utc))
    _add_exam(db, lecturer, "NEW200", datetime(2024, 11, 20, tzinfo=timezone.utc))

    snapshot = build_snapshot(db, user=lecturer, last_sync=datetime(2024, 11, 1, tzinfo=timezone.utc))

    assert [item["course_code"] for item in snapshot.data["exams"]] == ["NEW200"]


def test_snapshot_include_flags_omit_sections(db, make_user):
    lecturer = make_user(UserRole.lecturer)

    snapshot = build_snapshot(db, user=lecturer, include_exams=False, include_notifications=False)

    assert set(snapshot.data) == {"userPreferences"}
