from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_lecturer_or_admin
from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.conflict import ConflictCheckRequest, ConflictCheckResponse, ConflictReport
from app.schemas.exam import ExamCreate, ExamOut, ExamUpdate
from app.services import exams as exam_service
from app.services.audit import log_activity
from app.services.conflict_service import BookingCandidate, build_conflict_report, detect_conflicts, summarize

router = APIRouter()


@router.get("", response_model=list[ExamOut])
def list_exams(db: Session = Depends(get_db)) -> list[ExamOut]:
    return exam_service.list_exams(db)


@router.post("/check-conflicts", response_model=ConflictCheckResponse)
def check_conflicts(
    payload: ConflictCheckRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_lecturer_or_admin),
) -> ConflictCheckResponse:
    candidate = BookingCandidate(
        date=payload.date,
        time=payload.time,
        venue=payload.venue,
        duration=payload.duration,
        course_code=payload.courseCode,
    )
    conflicts = [
        item.to_schema()
        for item in detect_conflicts(
            candidate,
            exam_service.upcoming_exams_on(db, payload.date),
            exclude_id=payload.excludeId,
        )
    ]
    return ConflictCheckResponse(
        hasConflicts=bool(conflicts),
        conflicts=conflicts,
        summary=summarize(item.severity for item in conflicts),
    )


@router.get("/conflicts", response_model=ConflictReport)
def conflict_report(
    exam_date: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_lecturer_or_admin),
) -> ConflictReport:
    exams = exam_service.list_exams(db, start=exam_date, end=exam_date)
    return build_conflict_report(exams)


@router.get("/range/{start_date}/{end_date}", response_model=list[ExamOut])
def list_exams_in_range(start_date: date, end_date: date, db: Session = Depends(get_db)) -> list[ExamOut]:
    if start_date > end_date:
        raise ValidationError("startDate must be before or equal to endDate")
    return exam_service.list_exams(db, start=start_date, end=end_date)


@router.get("/{exam_id}", response_model=ExamOut)
def get_exam(exam_id: int, db: Session = Depends(get_db)) -> ExamOut:
    return exam_service.get_exam(db, exam_id)


@router.post("", response_model=ExamOut, status_code=status.HTTP_201_CREATED)
def create_exam(
    payload: ExamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_lecturer_or_admin),
) -> ExamOut:
    exam = exam_service.create_exam(db, payload, owner=current_user)
    log_activity(db, user=current_user, action="exam.create", entity_type="exam", entity_id=exam.id)
    db.commit()
    db.refresh(exam)
    return exam


@router.put("/{exam_id}", response_model=ExamOut)
def update_exam(
    exam_id: int,
    payload: ExamUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_lecturer_or_admin),
) -> ExamOut:
    settings = get_settings()
    exam = exam_service.get_exam(db, exam_id)
    exam_service.ensure_can_modify(current_user, exam, verb="edit")
    target_date = payload.date if payload.date is not None else exam.date
    with exam_service.booking_guard(db, target_date if settings.recheck_conflicts_on_update else None):
        exam_service.update_exam(db, exam, payload, recheck_conflicts=settings.recheck_conflicts_on_update)
        log_activity(db, user=current_user, action="exam.update", entity_type="exam", entity_id=exam.id)
        db.commit()
    db.refresh(exam)
    return exam


@router.delete("/{exam_id}")
def delete_exam(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_lecturer_or_admin),
) -> dict:
    exam = exam_service.get_exam(db, exam_id)
    exam_service.ensure_can_modify(current_user, exam, verb="delete")
    exam_service.delete_exam(db, exam)
    log_activity(db, user=current_user, action="exam.delete", entity_type="exam", entity_id=exam_id)
    db.commit()
    return {"success": True, "message": "Exam deleted successfully"}
