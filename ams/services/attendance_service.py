"""Bulk attendance marking, corrections and percentage aggregation.

Marking is validate-then-commit: every check runs before any row is staged,
and the batch is committed in one transaction. The unique index on
(student_id, course_id, date) is what actually prevents duplicates when two
submissions race; the pre-check only produces the friendlier message.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable

from sqlalchemy.exc import IntegrityError

from ams.core.clock import utc_now
from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.attendance import Attendance
from ams.models.course import Course
from ams.models.enums import AttendanceStatus
from ams.models.user import User
from ams.repositories import UnitOfWork
from ams.schemas.attendance import AttendanceResponse, AttendanceUpdateRequest, MarkAttendanceRequest

logger = logging.getLogger(__name__)

PERCENTAGE_QUANTUM = Decimal('0.01')


@dataclass(frozen=True)
class AttendanceSummary:
    total_classes: int
    present_count: int
    absent_count: int
    late_count: int
    attendance_percentage: float


def calculate_attendance_percentage(total_classes: int, present_count: int, late_count: int) -> float:
    """Late counts as attended. Rounded half-to-even to two decimals; 0 with no classes."""
    if total_classes <= 0:
        return 0.0
    ratio = Decimal(present_count + late_count) / Decimal(total_classes) * 100
    return float(ratio.quantize(PERCENTAGE_QUANTUM, rounding=ROUND_HALF_EVEN))


def summarize_attendance(
    records: Iterable[Attendance],
    start_date: date | None = None,
    end_date: date | None = None,
) -> AttendanceSummary:
    filtered = [
        record
        for record in records
        if (start_date is None or record.date >= start_date)
        and (end_date is None or record.date <= end_date)
    ]
    present_count = sum(1 for record in filtered if record.status == AttendanceStatus.PRESENT)
    absent_count = sum(1 for record in filtered if record.status == AttendanceStatus.ABSENT)
    late_count = sum(1 for record in filtered if record.status == AttendanceStatus.LATE)

    return AttendanceSummary(
        total_classes=len(filtered),
        present_count=present_count,
        absent_count=absent_count,
        late_count=late_count,
        attendance_percentage=calculate_attendance_percentage(len(filtered), present_count, late_count),
    )


def already_marked_message(on_date: date) -> str:
    return f'Attendance has already been marked for {on_date:%Y-%m-%d}'


class AttendanceService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @service_operation('marking attendance')
    def mark_attendance(self, data: MarkAttendanceRequest, teacher_id: int) -> ServiceResult:
        course = self.uow.courses.get_by_id(data.course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        if course.teacher_id != teacher_id:
            return ServiceResult.fail(
                'You are not authorized to mark attendance for this course',
                kind=ErrorKind.AUTHORIZATION,
            )

        if self.uow.attendance.exists_for_course_on_date(course.id, data.date):
            return ServiceResult.fail(already_marked_message(data.date), kind=ErrorKind.CONFLICT)

        enrolled_ids = self.uow.enrollments.active_student_ids(course.id)
        seen: set[int] = set()
        for entry in data.students:
            if entry.student_id not in enrolled_ids:
                return ServiceResult.fail(
                    f'Student ID {entry.student_id} is not enrolled in this course',
                    kind=ErrorKind.VALIDATION,
                )
            if entry.student_id in seen:
                return ServiceResult.fail(
                    f'Student ID {entry.student_id} appears more than once',
                    kind=ErrorKind.VALIDATION,
                )
            seen.add(entry.student_id)

        marked_at = utc_now()
        records = [
            Attendance(
                student_id=entry.student_id,
                course_id=course.id,
                date=data.date,
                status=entry.status,
                remarks=entry.remarks.strip() if entry.remarks else None,
                marked_at=marked_at,
                marked_by=teacher_id,
            )
            for entry in data.students
        ]
        self.uow.attendance.add_range(records)

        try:
            self.uow.save_changes()
        except IntegrityError:
            # A concurrent submission for the same date won the unique index.
            self.uow.rollback()
            logger.warning('Concurrent attendance submission for course %s on %s', course.id, data.date)
            return ServiceResult.fail(already_marked_message(data.date), kind=ErrorKind.CONFLICT)

        logger.info('Attendance marked for course %s on %s (%d students)', course.id, data.date, len(records))
        return ServiceResult.ok(True, 'Attendance marked successfully')

    @service_operation('updating attendance')
    def update_attendance(self, attendance_id: int, data: AttendanceUpdateRequest, teacher_id: int) -> ServiceResult:
        attendance = self.uow.attendance.get_by_id(attendance_id)
        if attendance is None:
            return ServiceResult.fail('Attendance record not found', kind=ErrorKind.NOT_FOUND)

        course = self.uow.courses.get_by_id(attendance.course_id)
        if course is None or course.teacher_id != teacher_id:
            return ServiceResult.fail(
                'You are not authorized to update this attendance record',
                kind=ErrorKind.AUTHORIZATION,
            )

        attendance.status = data.status
        attendance.remarks = data.remarks.strip() if data.remarks else None
        self.uow.attendance.update(attendance)
        self.uow.save_changes()

        student = self.uow.users.get_by_id(attendance.student_id)
        return ServiceResult.ok(self._to_response(attendance, student, course), 'Attendance updated successfully')

    @service_operation('retrieving attendance')
    def get_student_attendance(self, student_id: int, course_id: int | None = None) -> ServiceResult:
        student = self.uow.users.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail('Student not found', kind=ErrorKind.NOT_FOUND)

        criteria = [Attendance.student_id == student_id]
        if course_id is not None:
            criteria.append(Attendance.course_id == course_id)

        courses: dict[int, Course | None] = {}
        responses = []
        for record in self.uow.attendance.find(*criteria):
            if record.course_id not in courses:
                courses[record.course_id] = self.uow.courses.get_by_id(record.course_id)
            responses.append(self._to_response(record, student, courses[record.course_id]))
        return ServiceResult.ok(responses)

    @service_operation('retrieving course attendance')
    def get_course_attendance(
        self,
        course_id: int,
        on_date: date | None = None,
        teacher_id: int | None = None,
    ) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        if teacher_id is not None and course.teacher_id != teacher_id:
            return ServiceResult.fail(
                'You are not authorized to view attendance for this course',
                kind=ErrorKind.AUTHORIZATION,
            )

        criteria = [Attendance.course_id == course_id]
        if on_date is not None:
            criteria.append(Attendance.date == on_date)

        students: dict[int, User | None] = {}
        responses = []
        for record in self.uow.attendance.find(*criteria):
            if record.student_id not in students:
                students[record.student_id] = self.uow.users.get_by_id(record.student_id)
            responses.append(self._to_response(record, students[record.student_id], course))
        return ServiceResult.ok(responses)

    @staticmethod
    def _to_response(record: Attendance, student: User | None, course: Course | None) -> AttendanceResponse:
        return AttendanceResponse(
            id=record.id,
            student_id=record.student_id,
            student_name=student.full_name if student is not None else 'Unknown',
            registration_number=(student.registration_number if student is not None else None) or 'N/A',
            course_id=record.course_id,
            course_name=course.course_name if course is not None else 'Unknown',
            date=record.date,
            status=record.status,
            remarks=record.remarks,
        )
