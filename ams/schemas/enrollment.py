from datetime import datetime

from pydantic import BaseModel


class EnrollmentResponse(BaseModel):
    course_id: int
    course_code: str
    course_name: str
    enrolled_at: datetime
    student_id: int | None = None
    student_name: str | None = None
    registration_number: str | None = None
