"""Course model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from ams.core.clock import utc_now
from ams.database import Base
from ams.models.enums import RecordStatus, db_enum


class Course(Base):
    """Represents a course owned by a teacher."""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    course_code = Column(String(20), unique=True, index=True, nullable=False)
    course_name = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=False, default="")
    credit_hours = Column(Integer, nullable=False)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(db_enum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE
