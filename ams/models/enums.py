"""Enumerations shared by the models, services and schemas."""

import enum

from sqlalchemy import Enum as SAEnum


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    TEACHER = "Teacher"
    STUDENT = "Student"


class RecordStatus(str, enum.Enum):
    """Lifecycle of soft-deletable rows (users, courses, enrollments)."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


def db_enum(enum_cls: type[enum.Enum]) -> SAEnum:
    # Store the enum values, not the member names, so raw SQL (partial index
    # predicates, reports) can use the readable form.
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=16,
        values_callable=lambda members: [member.value for member in members],
    )
