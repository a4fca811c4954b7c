"""
Exam booking conflict detection.

Bookings are half-open intervals [start, start + duration) on a single date.
Two checks exist and intentionally follow different rules:

* ``detect_conflicts`` compares one candidate against the bookings of its date.
  A shared venue is a conflict even without a time overlap, since a venue is
  treated as reserved for the whole day once used.
* ``detect_all_conflicts`` scans every pair of upcoming bookings on the same
  date. A shared venue is reported as ``both`` regardless of time, otherwise
  a time overlap is reported as ``time_overlap``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Protocol

from app.models.exam import Exam, ExamStatus
from app.schemas.conflict import ConflictOut, ConflictReport, ConflictReportEntry, ConflictSummary
from app.schemas.exam import parse_time_to_minutes


class ConflictType(str, Enum):
    time_overlap = "time_overlap"
    venue_conflict = "venue_conflict"
    both = "both"


class ConflictSeverity(str, Enum):
    warning = "warning"
    error = "error"


def severity_for(conflict_type: ConflictType) -> ConflictSeverity:
    return ConflictSeverity.error if conflict_type is ConflictType.both else ConflictSeverity.warning


class Booking(Protocol):
    date: date
    time: str
    venue: str
    duration: int


@dataclass(frozen=True)
class BookingCandidate:
    date: date
    time: str
    venue: str
    duration: int
    course_code: str | None = None


@dataclass(frozen=True)
class ExamConflict:
    exam_id: int
    course_code: str
    conflict_type: ConflictType
    message: str

    @property
    def severity(self) -> ConflictSeverity:
        return severity_for(self.conflict_type)

    def to_schema(self) -> ConflictOut:
        return ConflictOut(
            examId=self.exam_id,
            courseCode=self.course_code,
            conflictType=self.conflict_type.value,
            severity=self.severity.value,
            message=self.message,
        )


def intervals_overlap(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    # Half-open: touching endpoints do not overlap.
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def format_minutes(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"


def _window(booking: Booking) -> tuple[int, int]:
    start = parse_time_to_minutes(booking.time)
    return start, start + booking.duration


def _classify(time_overlap: bool, venue_conflict: bool) -> ConflictType | None:
    if time_overlap and venue_conflict:
        return ConflictType.both
    if venue_conflict:
        return ConflictType.venue_conflict
    if time_overlap:
        return ConflictType.time_overlap
    return None


def _describe(conflict_type: ConflictType, existing: Exam) -> str:
    start, end = _window(existing)
    window = f"{format_minutes(start)}-{format_minutes(end)}"
    if conflict_type is ConflictType.both:
        return f"{existing.course_code} is already scheduled in {existing.venue} from {window}"
    if conflict_type is ConflictType.venue_conflict:
        return f"Venue {existing.venue} is already booked for {existing.course_code} on {existing.date.isoformat()}"
    return f"Time overlaps with {existing.course_code} ({window}) in {existing.venue}"


def detect_conflicts(
    candidate: Booking,
    existing: Iterable[Exam],
    *,
    exclude_id: int | None = None,
) -> list[ExamConflict]:
    """Classify the collisions between ``candidate`` and bookings sharing its date.

    Only upcoming bookings are considered and ``exclude_id`` is skipped, so an
    exam being edited never collides with itself. One entry is emitted per
    colliding booking, in input order.
    """
    candidate_start = parse_time_to_minutes(candidate.time)
    conflicts: list[ExamConflict] = []
    for exam in existing:
        if exclude_id is not None and exam.id == exclude_id:
            continue
        if exam.status != ExamStatus.upcoming or exam.date != candidate.date:
            continue

        time_overlap = intervals_overlap(
            candidate_start,
            candidate.duration,
            parse_time_to_minutes(exam.time),
            exam.duration,
        )
        venue_conflict = exam.venue == candidate.venue
        conflict_type = _classify(time_overlap, venue_conflict)
        if conflict_type is None:
            continue
        conflicts.append(
            ExamConflict(
                exam_id=exam.id,
                course_code=exam.course_code,
                conflict_type=conflict_type,
                message=_describe(conflict_type, exam),
            )
        )
    return conflicts


def detect_all_conflicts(exams: Iterable[Exam]) -> list[ConflictReportEntry]:
    """Pairwise report over all upcoming bookings, grouped by date."""
    exams_by_date: dict[date, list[Exam]] = defaultdict(list)
    for exam in exams:
        if exam.status == ExamStatus.upcoming:
            exams_by_date[exam.date].append(exam)

    entries: list[ConflictReportEntry] = []
    for exam_date in sorted(exams_by_date):
        day_exams = exams_by_date[exam_date]
        for i, first in enumerate(day_exams):
            first_start, first_end = _window(first)
            for second in day_exams[i + 1:]:
                second_start, second_end = _window(second)
                if first.venue == second.venue:
                    conflict_type = ConflictType.both
                    message = (
                        f"{first.course_code} and {second.course_code} are both booked in "
                        f"{first.venue} on {exam_date.isoformat()}"
                    )
                elif intervals_overlap(first_start, first.duration, second_start, second.duration):
                    conflict_type = ConflictType.time_overlap
                    message = (
                        f"{first.course_code} ({format_minutes(first_start)}-{format_minutes(first_end)}) overlaps "
                        f"{second.course_code} ({format_minutes(second_start)}-{format_minutes(second_end)})"
                    )
                else:
                    continue
                entries.append(
                    ConflictReportEntry(
                        exam1Id=first.id,
                        exam2Id=second.id,
                        exam1Code=first.course_code,
                        exam2Code=second.course_code,
                        date=exam_date,
                        conflictType=conflict_type.value,
                        severity=severity_for(conflict_type).value,
                        message=message,
                    )
                )
    return entries


def summarize(severities: Iterable[str]) -> ConflictSummary:
    values = list(severities)
    errors = sum(1 for value in values if value == ConflictSeverity.error.value)
    return ConflictSummary(total=len(values), errors=errors, warnings=len(values) - errors)


def build_conflict_report(exams: Iterable[Exam]) -> ConflictReport:
    entries = detect_all_conflicts(exams)
    return ConflictReport(conflicts=entries, summary=summarize(entry.severity for entry in entries))
