import re
from datetime import date as date_type, datetime

from pydantic import BaseModel, Field, field_validator

from app.core.config import get_settings
from app.models.exam import ExamStatus

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def normalize_time(value: str) -> str:
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError("time must be in HH:MM format (24-hour)")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def parse_time_to_minutes(value: str) -> int:
    hours, minutes = normalize_time(value).split(":")
    return int(hours) * 60 + int(minutes)


def _check_duration(value: int | None) -> int | None:
    if value is None:
        return None
    settings = get_settings()
    if not settings.exam_duration_min_minutes <= value <= settings.exam_duration_max_minutes:
        raise ValueError(
            "duration must be a number between "
            f"{settings.exam_duration_min_minutes} and {settings.exam_duration_max_minutes} minutes"
        )
    return value


def _strip_required(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("must be a non-empty string")
    return trimmed


class ExamCreate(BaseModel):
    model_config = {"populate_by_name": True}

    course_code: str = Field(alias="courseCode", min_length=1, max_length=20)
    course_name: str = Field(alias="courseName", min_length=1, max_length=100)
    date: date_type
    time: str
    venue: str = Field(min_length=1, max_length=100)
    duration: int
    status: ExamStatus = ExamStatus.upcoming

    @field_validator("course_code", "course_name", "venue")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        return _check_duration(value)


class ExamUpdate(BaseModel):
    model_config = {"populate_by_name": True}

    course_code: str | None = Field(default=None, alias="courseCode", min_length=1, max_length=20)
    course_name: str | None = Field(default=None, alias="courseName", min_length=1, max_length=100)
    date: date_type | None = None
    time: str | None = None
    venue: str | None = Field(default=None, min_length=1, max_length=100)
    duration: int | None = None
    status: ExamStatus | None = None

    @field_validator("course_code", "course_name", "venue")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _strip_required(value)

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_time(value)

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int | None) -> int | None:
        return _check_duration(value)


class ExamChangeRef(BaseModel):
    """Identifies the exam targeted by an offline update or delete."""

    id: int = Field(ge=1)


class ExamOut(BaseModel):
    id: int
    course_code: str
    course_name: str
    date: date_type
    time: str
    venue: str
    duration: int
    status: ExamStatus
    created_by: str
    created_by_name: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
