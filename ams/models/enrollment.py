"""Enrollment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, text

from ams.core.clock import utc_now
from ams.database import Base
from ams.models.enums import RecordStatus, db_enum


class Enrollment(Base):
    """Links a student to a course; unenrolling flips the status."""
    __tablename__ = "enrollments"
    __table_args__ = (
        Index("idx_enrollments_student_course", "student_id", "course_id"),
        Index(
            "uq_enrollments_active_student_course",
            "student_id",
            "course_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    status = Column(db_enum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE)
    enrolled_at = Column(DateTime, nullable=False, default=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE
