"""Typed data access for each entity plus a unit of work bundling them.

Each accessor exposes the same narrow surface (``get_by_id``, ``find``,
``first``, ``add``, ``add_range``, ``update``) and a few entity-specific
lookups. Nothing here commits; ``UnitOfWork.save_changes`` does.
"""

from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ams.models.attendance import Attendance
from ams.models.course import Course
from ams.models.enrollment import Enrollment
from ams.models.enums import RecordStatus, UserRole
from ams.models.refresh_token import RefreshToken
from ams.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find(self, *criteria) -> list[User]:
        return self.db.query(User).filter(*criteria).order_by(User.id.asc()).all()

    def first(self, *criteria) -> User | None:
        return self.db.query(User).filter(*criteria).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        return user

    def add_range(self, users: list[User]) -> None:
        self.db.add_all(users)

    def update(self, user: User) -> User:
        return self.db.merge(user)

    def get_by_email(self, email: str) -> User | None:
        return self.first(func.lower(User.email) == email.strip().lower())

    def get_by_registration_number(self, registration_number: str) -> User | None:
        return self.first(User.registration_number == registration_number)

    def active(self) -> list[User]:
        return self.find(User.status == RecordStatus.ACTIVE)

    def active_with_role(self, role: UserRole) -> list[User]:
        return self.find(User.role == role, User.status == RecordStatus.ACTIVE)


class CourseRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, course_id: int) -> Course | None:
        return self.db.get(Course, course_id)

    def find(self, *criteria) -> list[Course]:
        return self.db.query(Course).filter(*criteria).order_by(Course.course_code.asc()).all()

    def first(self, *criteria) -> Course | None:
        return self.db.query(Course).filter(*criteria).first()

    def add(self, course: Course) -> Course:
        self.db.add(course)
        return course

    def add_range(self, courses: list[Course]) -> None:
        self.db.add_all(courses)

    def update(self, course: Course) -> Course:
        return self.db.merge(course)

    def get_by_code(self, course_code: str, exclude_id: int | None = None) -> Course | None:
        criteria = [func.lower(Course.course_code) == course_code.strip().lower()]
        if exclude_id is not None:
            criteria.append(Course.id != exclude_id)
        return self.first(*criteria)

    def active(self) -> list[Course]:
        return self.find(Course.status == RecordStatus.ACTIVE)

    def active_for_teacher(self, teacher_id: int) -> list[Course]:
        return self.find(Course.teacher_id == teacher_id, Course.status == RecordStatus.ACTIVE)


class EnrollmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, enrollment_id: int) -> Enrollment | None:
        return self.db.get(Enrollment, enrollment_id)

    def find(self, *criteria) -> list[Enrollment]:
        return self.db.query(Enrollment).filter(*criteria).order_by(Enrollment.id.asc()).all()

    def first(self, *criteria) -> Enrollment | None:
        return self.db.query(Enrollment).filter(*criteria).first()

    def add(self, enrollment: Enrollment) -> Enrollment:
        self.db.add(enrollment)
        return enrollment

    def add_range(self, enrollments: list[Enrollment]) -> None:
        self.db.add_all(enrollments)

    def update(self, enrollment: Enrollment) -> Enrollment:
        return self.db.merge(enrollment)

    def get_active(self, student_id: int, course_id: int) -> Enrollment | None:
        return self.first(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.status == RecordStatus.ACTIVE,
        )

    def active_for_course(self, course_id: int) -> list[Enrollment]:
        return self.find(Enrollment.course_id == course_id, Enrollment.status == RecordStatus.ACTIVE)

    def active_for_student(self, student_id: int) -> list[Enrollment]:
        return self.find(Enrollment.student_id == student_id, Enrollment.status == RecordStatus.ACTIVE)

    def active_student_ids(self, course_id: int) -> set[int]:
        rows = self.db.query(Enrollment.student_id).filter(
            Enrollment.course_id == course_id,
            Enrollment.status == RecordStatus.ACTIVE,
        ).all()
        return {student_id for (student_id,) in rows}


class AttendanceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, attendance_id: int) -> Attendance | None:
        return self.db.get(Attendance, attendance_id)

    def find(self, *criteria) -> list[Attendance]:
        return (
            self.db.query(Attendance)
            .filter(*criteria)
            .order_by(Attendance.date.desc(), Attendance.id.asc())
            .all()
        )

    def first(self, *criteria) -> Attendance | None:
        return self.db.query(Attendance).filter(*criteria).first()

    def add(self, attendance: Attendance) -> Attendance:
        self.db.add(attendance)
        return attendance

    def add_range(self, records: list[Attendance]) -> None:
        self.db.add_all(records)

    def update(self, attendance: Attendance) -> Attendance:
        return self.db.merge(attendance)

    def exists_for_course_on_date(self, course_id: int, on_date: date) -> bool:
        return self.first(Attendance.course_id == course_id, Attendance.date == on_date) is not None

    def for_student_in_course(
        self,
        student_id: int,
        course_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Attendance]:
        criteria = [Attendance.student_id == student_id, Attendance.course_id == course_id]
        if start_date is not None:
            criteria.append(Attendance.date >= start_date)
        if end_date is not None:
            criteria.append(Attendance.date <= end_date)
        return self.find(*criteria)


class RefreshTokenRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, token_id: int) -> RefreshToken | None:
        return self.db.get(RefreshToken, token_id)

    def find(self, *criteria) -> list[RefreshToken]:
        return self.db.query(RefreshToken).filter(*criteria).order_by(RefreshToken.id.asc()).all()

    def first(self, *criteria) -> RefreshToken | None:
        return self.db.query(RefreshToken).filter(*criteria).first()

    def add(self, token: RefreshToken) -> RefreshToken:
        self.db.add(token)
        return token

    def add_range(self, tokens: list[RefreshToken]) -> None:
        self.db.add_all(tokens)

    def update(self, token: RefreshToken) -> RefreshToken:
        return self.db.merge(token)

    def get_by_token(self, token: str) -> RefreshToken | None:
        return self.first(RefreshToken.token == token)

    def active_for_user(self, user_id: int, now: datetime) -> list[RefreshToken]:
        return self.find(
            RefreshToken.user_id == user_id,
            RefreshToken.is_revoked.is_(False),
            RefreshToken.expires_at > now,
        )


class UnitOfWork:
    """Repositories sharing one session; ``save_changes`` commits them together."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.courses = CourseRepository(db)
        self.enrollments = EnrollmentRepository(db)
        self.attendance = AttendanceRepository(db)
        self.refresh_tokens = RefreshTokenRepository(db)

    def save_changes(self) -> None:
        self.db.commit()

    def flush(self) -> None:
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()
