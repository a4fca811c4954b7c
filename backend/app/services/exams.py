from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
import logging
from threading import Lock

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, PermissionDeniedError, ResourceNotFoundError
from app.models.exam import Exam, ExamStatus
from app.models.user import User, UserRole
from app.schemas.exam import ExamCreate, ExamUpdate
from app.services.conflict_service import BookingCandidate, detect_conflicts

logger = logging.getLogger(__name__)

EXAM_EDITOR_ROLES = {UserRole.lecturer, UserRole.admin}


class _DateLocks:
    def __init__(self) -> None:
        self._locks: dict[date, Lock] = defaultdict(Lock)
        self._guard = Lock()

    def get(self, exam_date: date) -> Lock:
        with self._guard:
            return self._locks[exam_date]


_date_locks = _DateLocks()


@contextmanager
def booking_guard(db: Session, exam_date: date | None) -> Iterator[None]:
    """Serialize conflict reads and booking writes for one exam date.

    The caller must commit inside the block. On PostgreSQL a transaction-scoped
    advisory lock extends the guard across worker processes.
    """
    if exam_date is None:
        yield
        return
    lock = _date_locks.get(exam_date)
    with lock:
        bind = db.get_bind()
        if bind.dialect.name == "postgresql":
            db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": exam_date.toordinal()})
        yield


def get_exam(db: Session, exam_id: int) -> Exam:
    exam = db.get(Exam, exam_id)
    if exam is None:
        raise ResourceNotFoundError("Exam", exam_id)
    return exam


def list_exams(db: Session, *, start: date | None = None, end: date | None = None) -> list[Exam]:
    query = select(Exam).order_by(Exam.date.asc(), Exam.time.asc(), Exam.id.asc())
    if start is not None:
        query = query.where(Exam.date >= start)
    if end is not None:
        query = query.where(Exam.date <= end)
    return list(db.execute(query).scalars())


def upcoming_exams_on(db: Session, exam_date: date) -> list[Exam]:
    query = (
        select(Exam)
        .where(Exam.date == exam_date, Exam.status == ExamStatus.upcoming)
        .order_by(Exam.time.asc(), Exam.id.asc())
    )
    return list(db.execute(query).scalars())


def ensure_can_create(actor: User) -> None:
    if actor.role not in EXAM_EDITOR_ROLES:
        raise PermissionDeniedError("Only lecturers and admins can create exams")


def ensure_can_modify(actor: User, exam: Exam, *, verb: str = "edit") -> None:
    if exam.created_by != actor.id and not actor.is_admin:
        raise PermissionDeniedError(f"Permission denied: can only {verb} own exams")


def create_exam(db: Session, payload: ExamCreate, *, owner: User) -> Exam:
    exam = Exam(
        course_code=payload.course_code,
        course_name=payload.course_name,
        date=payload.date,
        time=payload.time,
        venue=payload.venue,
        duration=payload.duration,
        status=payload.status,
        created_by=owner.id,
    )
    db.add(exam)
    db.flush()
    logger.info("Exam %s (%s) created by %s", exam.id, exam.course_code, owner.id)
    return exam


def update_exam(db: Session, exam: Exam, payload: ExamUpdate, *, recheck_conflicts: bool = False) -> Exam:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if recheck_conflicts:
        candidate = BookingCandidate(
            date=changes.get("date", exam.date),
            time=changes.get("time", exam.time),
            venue=changes.get("venue", exam.venue),
            duration=changes.get("duration", exam.duration),
            course_code=changes.get("course_code", exam.course_code),
        )
        conflicts = detect_conflicts(candidate, upcoming_exams_on(db, candidate.date), exclude_id=exam.id)
        if conflicts:
            raise ConflictError(
                f"Exam update collides with {len(conflicts)} exam(s)",
                conflicts=[item.to_schema().model_dump() for item in conflicts],
            )

    for field, value in changes.items():
        setattr(exam, field, value)
    db.flush()
    return exam


def delete_exam(db: Session, exam: Exam) -> None:
    db.delete(exam)
    db.flush()
    logger.info("Exam %s (%s) deleted", exam.id, exam.course_code)
