import re
from datetime import datetime

from pydantic import BaseModel, field_validator

COURSE_CODE_PATTERN = re.compile(r'^[A-Z]{3}-\d{3}$')
MAX_COURSE_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MIN_CREDIT_HOURS = 1
MAX_CREDIT_HOURS = 6


class CourseRequest(BaseModel):
    course_code: str
    course_name: str
    description: str = ''
    credit_hours: int
    teacher_id: int

    @field_validator('course_code')
    @classmethod
    def validate_course_code(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not COURSE_CODE_PATTERN.match(normalized):
            raise ValueError('Course code must be in format: ABC-123')
        return normalized

    @field_validator('course_name')
    @classmethod
    def validate_course_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Course name is required.')
        if len(normalized) > MAX_COURSE_NAME_LENGTH:
            raise ValueError(f'Course name cannot exceed {MAX_COURSE_NAME_LENGTH} characters.')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(f'Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters.')
        return normalized

    @field_validator('credit_hours')
    @classmethod
    def validate_credit_hours(cls, value: int) -> int:
        if not MIN_CREDIT_HOURS <= value <= MAX_CREDIT_HOURS:
            raise ValueError(f'Credit hours must be between {MIN_CREDIT_HOURS} and {MAX_CREDIT_HOURS}.')
        return value


class CourseResponse(BaseModel):
    id: int
    course_code: str
    course_name: str
    description: str
    credit_hours: int
    teacher_id: int
    teacher_name: str
    enrolled_students: int = 0
    is_enrolled: bool = False
    created_at: datetime
