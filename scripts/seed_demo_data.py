"""Seed demo accounts, sample exams and notifications.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py
"""

from __future__ import annotations

from datetime import date
import os

from sqlalchemy import select

from app.core.security import get_password_hash
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.exam import Exam
from app.models.notification import Notification, NotificationType
from app.models.user import User, UserRole

DEFAULT_PASSWORD = os.getenv("DEMO_PASSWORD", "demo123")

DEMO_ACCOUNTS = {
    "student": {"email": "student@exam.com", "first_name": "John", "last_name": "Student", "role": UserRole.student},
    "admin": {"email": "admin@exam.com", "first_name": "Admin", "last_name": "User", "role": UserRole.admin},
    "lecturer": {"email": "lecturer@exam.com", "first_name": "Dr. Jane", "last_name": "Smith", "role": UserRole.lecturer},
}

SAMPLE_EXAMS = [
    ("CS101", "Introduction to Programming", date(2024, 12, 15), "09:00", "Room 101, CS Building", 120),
    ("MATH201", "Calculus II", date(2024, 12, 17), "14:00", "Hall A, Main Building", 180),
    ("PHY301", "Quantum Physics", date(2024, 12, 20), "10:30", "Lab 205, Physics Building", 150),
    ("ENG102", "Technical Writing", date(2024, 12, 22), "11:00", "Room 301, Liberal Arts", 120),
    ("CHEM201", "Organic Chemistry", date(2024, 12, 25), "13:30", "Lab 102, Chemistry Building", 180),
]

SAMPLE_NOTIFICATIONS = [
    ("student", "Exam Reminder", "CS101 exam is tomorrow at 9:00 AM in Room 101", NotificationType.reminder),
    (
        "student",
        "Schedule Conflict Detected",
        "Potential conflict between MATH201 and PHY301 on the same day",
        NotificationType.warning,
    ),
    ("admin", "Timetable Synced", "Your timetable has been successfully synced", NotificationType.success),
]


def _upsert_user(*, email: str, first_name: str, last_name: str, role: UserRole) -> User:
    with SessionLocal() as session:
        existing = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if existing is None:
            existing = User(
                email=email,
                hashed_password=get_password_hash(DEFAULT_PASSWORD),
                first_name=first_name,
                last_name=last_name,
                role=role,
                is_active=True,
            )
            session.add(existing)
        else:
            existing.first_name = first_name
            existing.last_name = last_name
            existing.role = role
            existing.is_active = True
        session.commit()
        session.refresh(existing)
        return existing


def _seed_exams(owner_id: str) -> int:
    created = 0
    with SessionLocal() as session:
        for code, name, exam_date, start, venue, duration in SAMPLE_EXAMS:
            exists = session.execute(
                select(Exam.id).where(Exam.course_code == code, Exam.date == exam_date)
            ).first()
            if exists:
                continue
            session.add(
                Exam(
                    course_code=code,
                    course_name=name,
                    date=exam_date,
                    time=start,
                    venue=venue,
                    duration=duration,
                    created_by=owner_id,
                )
            )
            created += 1
        session.commit()
    return created


def _seed_notifications(users: dict[str, User]) -> None:
    with SessionLocal() as session:
        for label, title, message, notification_type in SAMPLE_NOTIFICATIONS:
            user_id = users[label].id
            exists = session.execute(
                select(Notification.id).where(Notification.user_id == user_id, Notification.title == title)
            ).first()
            if exists:
                continue
            session.add(
                Notification(user_id=user_id, title=title, message=message, notification_type=notification_type)
            )
        session.commit()


def main() -> None:
    ensure_runtime_schema_compatibility()
    users = {label: _upsert_user(**account) for label, account in DEMO_ACCOUNTS.items()}
    created = _seed_exams(users["admin"].id)
    _seed_notifications(users)

    print("\nDemo accounts ready:")
    for label, user in users.items():
        print(f"  - {label}: {user.email} | role={user.role.value}")
    print(f"\nPassword for all demo accounts: {DEFAULT_PASSWORD}")
    print(f"Sample exams created: {created}")


if __name__ == "__main__":
    main()
