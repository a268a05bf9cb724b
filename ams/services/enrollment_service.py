import logging

from ams.core.clock import utc_now
from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.enrollment import Enrollment
from ams.models.enums import RecordStatus, UserRole
from ams.repositories import UnitOfWork
from ams.schemas.enrollment import EnrollmentResponse

logger = logging.getLogger(__name__)


class EnrollmentService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @service_operation('enrolling')
    def enroll(self, student_id: int, course_id: int) -> ServiceResult:
        student = self.uow.users.get_by_id(student_id)
        if student is None:
            return ServiceResult.fail('Student not found', kind=ErrorKind.NOT_FOUND)
        if student.role != UserRole.STUDENT:
            return ServiceResult.fail('User is not a student', kind=ErrorKind.VALIDATION)

        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        if not course.is_active:
            return ServiceResult.fail('Course is not active', kind=ErrorKind.VALIDATION)

        if self.uow.enrollments.get_active(student_id, course_id) is not None:
            return ServiceResult.fail('Student is already enrolled in this course', kind=ErrorKind.CONFLICT)

        self.uow.enrollments.add(
            Enrollment(
                student_id=student_id,
                course_id=course_id,
                status=RecordStatus.ACTIVE,
                enrolled_at=utc_now(),
            )
        )
        self.uow.save_changes()

        logger.info('Student %s enrolled in course %s', student_id, course_id)
        return ServiceResult.ok(True, 'Successfully enrolled in course')

    @service_operation('unenrolling')
    def unenroll(self, student_id: int, course_id: int) -> ServiceResult:
        enrollment = self.uow.enrollments.get_active(student_id, course_id)
        if enrollment is None:
            return ServiceResult.fail('Enrollment not found', kind=ErrorKind.NOT_FOUND)

        enrollment.status = RecordStatus.INACTIVE
        self.uow.enrollments.update(enrollment)
        self.uow.save_changes()

        logger.info('Student %s unenrolled from course %s', student_id, course_id)
        return ServiceResult.ok(True, 'Successfully unenrolled from course')

    @service_operation('retrieving enrollments')
    def get_student_enrollments(self, student_id: int) -> ServiceResult:
        enrollments = []
        for enrollment in self.uow.enrollments.active_for_student(student_id):
            course = self.uow.courses.get_by_id(enrollment.course_id)
            if course is None:
                continue
            enrollments.append(
                EnrollmentResponse(
                    course_id=course.id,
                    course_code=course.course_code,
                    course_name=course.course_name,
                    enrolled_at=enrollment.enrolled_at,
                )
            )
        return ServiceResult.ok(sorted(enrollments, key=lambda item: item.course_code))

    @service_operation('retrieving course enrollments')
    def get_course_enrollments(self, course_id: int, teacher_id: int | None = None) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        if teacher_id is not None and course.teacher_id != teacher_id:
            return ServiceResult.fail(
                'You are not authorized to view enrollments for this course',
                kind=ErrorKind.AUTHORIZATION,
            )

        enrollments = []
        for enrollment in self.uow.enrollments.active_for_course(course_id):
            student = self.uow.users.get_by_id(enrollment.student_id)
            if student is None:
                continue
            enrollments.append(
                EnrollmentResponse(
                    course_id=course.id,
                    course_code=course.course_code,
                    course_name=course.course_name,
                    enrolled_at=enrollment.enrolled_at,
                    student_id=student.id,
                    student_name=student.full_name,
                    registration_number=student.registration_number or 'N/A',
                )
            )
        return ServiceResult.ok(enrollments)
