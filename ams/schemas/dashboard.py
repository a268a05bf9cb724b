from pydantic import BaseModel

from ams.models.enums import UserRole
from ams.schemas.attendance import AttendanceResponse
from ams.schemas.course import CourseResponse
from ams.schemas.enrollment import EnrollmentResponse


class DashboardResponse(BaseModel):
    role: UserRole
    courses: list[CourseResponse] = []
    enrollments: list[EnrollmentResponse] = []
    recent_attendance: list[AttendanceResponse] = []
    total_courses: int = 0
    total_students: int = 0
