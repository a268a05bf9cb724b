import logging

from ams.core.clock import utc_now
from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.course import Course
from ams.models.enums import RecordStatus, UserRole
from ams.models.user import User
from ams.repositories import UnitOfWork
from ams.schemas.course import CourseRequest, CourseResponse

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @service_operation('retrieving courses')
    def get_all_courses(self, user_id: int | None = None, role: UserRole | None = None) -> ServiceResult:
        viewer_id = user_id if role == UserRole.STUDENT else None
        courses = [self._to_response(course, viewer_id=viewer_id) for course in self.uow.courses.active()]
        return ServiceResult.ok(courses)

    @service_operation('retrieving course')
    def get_course(self, course_id: int, user_id: int | None = None) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)
        return ServiceResult.ok(self._to_response(course, viewer_id=user_id))

    @service_operation('retrieving teacher courses')
    def get_teacher_courses(self, teacher_id: int) -> ServiceResult:
        teacher = self.uow.users.get_by_id(teacher_id)
        if teacher is None:
            return ServiceResult.fail('Teacher not found', kind=ErrorKind.NOT_FOUND)

        courses = self.uow.courses.active_for_teacher(teacher_id)
        return ServiceResult.ok([self._to_response(course, teacher=teacher) for course in courses])

    @service_operation('creating course')
    def create_course(self, data: CourseRequest, user_id: int, role: UserRole) -> ServiceResult:
        if role not in (UserRole.ADMIN, UserRole.TEACHER):
            return ServiceResult.fail('You are not allowed to create courses', kind=ErrorKind.AUTHORIZATION)
        if role == UserRole.TEACHER and data.teacher_id != user_id:
            return ServiceResult.fail('Teachers can only create courses they teach', kind=ErrorKind.AUTHORIZATION)

        if self.uow.courses.get_by_code(data.course_code) is not None:
            return ServiceResult.fail('Course code already exists', kind=ErrorKind.CONFLICT)

        teacher, failure = self._resolve_teacher(data.teacher_id)
        if failure is not None:
            return failure

        course = Course(
            course_code=data.course_code,
            course_name=data.course_name,
            description=data.description,
            credit_hours=data.credit_hours,
            teacher_id=teacher.id,
            status=RecordStatus.ACTIVE,
            created_at=utc_now(),
        )
        self.uow.courses.add(course)
        self.uow.save_changes()

        logger.info('Course %s created by user %s', course.course_code, user_id)
        return ServiceResult.ok(self._to_response(course, teacher=teacher), 'Course created successfully')

    @service_operation('updating course')
    def update_course(self, course_id: int, data: CourseRequest, user_id: int, role: UserRole) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)

        if role != UserRole.ADMIN and course.teacher_id != user_id:
            return ServiceResult.fail('You can only edit courses that you teach', kind=ErrorKind.AUTHORIZATION)
        if role == UserRole.TEACHER and data.teacher_id != user_id:
            return ServiceResult.fail('Only an admin can reassign a course to another teacher', kind=ErrorKind.AUTHORIZATION)

        if course.course_code.lower() != data.course_code.lower():
            if self.uow.courses.get_by_code(data.course_code, exclude_id=course.id) is not None:
                return ServiceResult.fail('Course code already exists', kind=ErrorKind.CONFLICT)

        teacher, failure = self._resolve_teacher(data.teacher_id)
        if failure is not None:
            return failure

        course.course_code = data.course_code
        course.course_name = data.course_name
        course.description = data.description
        course.credit_hours = data.credit_hours
        course.teacher_id = teacher.id
        self.uow.courses.update(course)
        self.uow.save_changes()

        return ServiceResult.ok(self._to_response(course, teacher=teacher), 'Course updated successfully')

    @service_operation('deleting course')
    def delete_course(self, course_id: int, user_id: int, role: UserRole) -> ServiceResult:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            return ServiceResult.fail('Course not found', kind=ErrorKind.NOT_FOUND)

        if role not in (UserRole.ADMIN, UserRole.TEACHER):
            return ServiceResult.fail('You are not allowed to delete courses', kind=ErrorKind.AUTHORIZATION)
        if role == UserRole.TEACHER and course.teacher_id != user_id:
            return ServiceResult.fail('You can only delete courses that you created', kind=ErrorKind.AUTHORIZATION)

        course.status = RecordStatus.INACTIVE
        self.uow.courses.update(course)
        self.uow.save_changes()

        logger.info('Course %s soft-deleted by user %s', course.id, user_id)
        return ServiceResult.ok(True, 'Course deleted successfully')

    def _resolve_teacher(self, teacher_id: int) -> tuple[User | None, ServiceResult | None]:
        teacher = self.uow.users.get_by_id(teacher_id)
        if teacher is None:
            return None, ServiceResult.fail('Teacher not found', kind=ErrorKind.NOT_FOUND)
        if teacher.role != UserRole.TEACHER:
            return None, ServiceResult.fail('Selected user is not a teacher', kind=ErrorKind.VALIDATION)
        return teacher, None

    def _to_response(
        self,
        course: Course,
        teacher: User | None = None,
        viewer_id: int | None = None,
    ) -> CourseResponse:
        teacher = teacher or self.uow.users.get_by_id(course.teacher_id)
        enrolled_ids = self.uow.enrollments.active_student_ids(course.id)
        return CourseResponse(
            id=course.id,
            course_code=course.course_code,
            course_name=course.course_name,
            description=course.description or '',
            credit_hours=course.credit_hours,
            teacher_id=course.teacher_id,
            teacher_name=teacher.full_name if teacher is not None else 'Unknown',
            enrolled_students=len(enrolled_ids),
            is_enrolled=viewer_id is not None and viewer_id in enrolled_ids,
            created_at=course.created_at,
        )
