"""Attendance model definitions."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String

from ams.core.clock import utc_now
from ams.database import Base
from ams.models.enums import AttendanceStatus, db_enum


class Attendance(Base):
    """One student's attendance in one course on one calendar date."""
    __tablename__ = "attendance"
    __table_args__ = (
        Index("uq_attendance_student_course_date", "student_id", "course_id", "date", unique=True),
        Index("idx_attendance_course_date", "course_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(db_enum(AttendanceStatus), nullable=False)
    remarks = Column(String(500), nullable=True)
    marked_at = Column(DateTime, nullable=False, default=utc_now)
    marked_by = Column(Integer, ForeignKey("users.id"), nullable=False)
