from datetime import date

from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.course import Course
from ams.models.enums import UserRole
from ams.models.user import User
from ams.repositories import UnitOfWork
from ams.schemas.report import AttendanceReportRow
from ams.services.attendance_service import summarize_attendance


class ReportService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @service_operation('generating report')
    def get_student_report(
        self,
        student_id: int,
        course_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ServiceResult:
        student = self.uow.users.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail('Student not found', kind=ErrorKind.NOT_FOUND)

        rows = []
        for enrollment in self.uow.enrollments.active_for_student(student_id):
            if course_id is not None and enrollment.course_id != course_id:
                continue
            course = self.uow.courses.get_by_id(enrollment.course_id)
            if course is None:
                continue
            rows.append(self._build_row(student, course, start_date, end_date))

        return ServiceResult.ok(sorted(rows, key=lambda row: row.course_name))

    @service_operation('generating course report')
    def get_course_report(
        self,
        course_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
        user_id: int | None = None,
        role: UserRole | None = None,
    ) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        if role == UserRole.TEACHER and course.teacher_id != user_id:
            return ServiceResult.fail(
                'You are not authorized to view reports for this course',
                kind=ErrorKind.AUTHORIZATION,
            )
        if role == UserRole.STUDENT:
            return ServiceResult.fail('Students can only view their own reports', kind=ErrorKind.AUTHORIZATION)

        rows = []
        for enrollment in self.uow.enrollments.active_for_course(course_id):
            student = self.uow.users.get_by_id(enrollment.student_id)
            if student is None:
                continue
            rows.append(self._build_row(student, course, start_date, end_date))

        return ServiceResult.ok(sorted(rows, key=lambda row: row.student_name))

    @service_operation('generating student course report')
    def get_student_course_report(
        self,
        student_id: int,
        course_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ServiceResult:
        student = self.uow.users.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail('Student not found', kind=ErrorKind.NOT_FOUND)
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)

        return ServiceResult.ok(self._build_row(student, course, start_date, end_date))

    def _build_row(
        self,
        student: User,
        course: Course,
        start_date: date | None,
        end_date: date | None,
    ) -> AttendanceReportRow:
        records = self.uow.attendance.for_student_in_course(student.id, course.id, start_date, end_date)
        summary = summarize_attendance(records, start_date, end_date)
        return AttendanceReportRow(
            student_name=student.full_name,
            registration_number=student.registration_number or 'N/A',
            course_name=course.course_name,
            total_classes=summary.total_classes,
            present_count=summary.present_count,
            absent_count=summary.absent_count,
            late_count=summary.late_count,
            attendance_percentage=summary.attendance_percentage,
        )
