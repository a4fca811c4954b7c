from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.exam import _check_duration, normalize_time

ConflictType = Literal["time_overlap", "venue_conflict", "both"]
ConflictSeverity = Literal["warning", "error"]


class ConflictCheckRequest(BaseModel):
    model_config = {"populate_by_name": True}

    courseCode: str | None = Field(default=None, max_length=20)
    courseName: str | None = Field(default=None, max_length=100)
    date: date_type
    time: str
    venue: str = Field(min_length=1, max_length=100)
    duration: int
    excludeId: int | None = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)

    @field_validator("venue")
    @classmethod
    def strip_venue(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("venue is required and must be a non-empty string")
        return trimmed

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        return _check_duration(value)


class ConflictOut(BaseModel):
    examId: int
    courseCode: str
    conflictType: ConflictType
    severity: ConflictSeverity
    message: str


class ConflictSummary(BaseModel):
    total: int
    errors: int
    warnings: int


class ConflictCheckResponse(BaseModel):
    hasConflicts: bool
    conflicts: list[ConflictOut]
    summary: ConflictSummary


class ConflictReportEntry(BaseModel):
    exam1Id: int
    exam2Id: int
    exam1Code: str
    exam2Code: str
    date: date_type
    conflictType: ConflictType
    severity: ConflictSeverity
    message: str


class ConflictReport(BaseModel):
    conflicts: list[ConflictReportEntry]
    summary: ConflictSummary
