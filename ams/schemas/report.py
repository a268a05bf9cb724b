from pydantic import BaseModel


class AttendanceReportRow(BaseModel):
    """One (student, course) aggregate; field order is the export column order."""

    student_name: str
    registration_number: str
    course_name: str
    total_classes: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_percentage: float
