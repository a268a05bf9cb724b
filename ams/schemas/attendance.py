from datetime import date

from pydantic import BaseModel, field_validator

from ams.models.enums import AttendanceStatus

MAX_REMARKS_LENGTH = 200


def _normalize_remarks(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    if len(normalized) > MAX_REMARKS_LENGTH:
        raise ValueError(f'Remarks must be {MAX_REMARKS_LENGTH} characters or fewer.')
    return normalized


class StudentAttendanceEntry(BaseModel):
    student_id: int
    status: AttendanceStatus
    remarks: str | None = None

    @field_validator('remarks')
    @classmethod
    def validate_remarks(cls, value: str | None) -> str | None:
        return _normalize_remarks(value)


class MarkAttendanceRequest(BaseModel):
    course_id: int
    date: date
    students: list[StudentAttendanceEntry]

    @field_validator('students')
    @classmethod
    def validate_students(cls, value: list[StudentAttendanceEntry]) -> list[StudentAttendanceEntry]:
        if not value:
            raise ValueError('At least one student is required.')
        return value


class AttendanceUpdateRequest(BaseModel):
    status: AttendanceStatus
    remarks: str | None = None

    @field_validator('remarks')
    @classmethod
    def validate_remarks(cls, value: str | None) -> str | None:
        return _normalize_remarks(value)


class AttendanceResponse(BaseModel):
    id: int
    student_id: int
    student_name: str
    registration_number: str
    course_id: int
    course_name: str
    date: date
    status: AttendanceStatus
    remarks: str | None = None
