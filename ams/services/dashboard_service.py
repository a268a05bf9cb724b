from ams.core.result import ServiceResult, service_operation
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.schemas.dashboard import DashboardResponse
from ams.services.attendance_service import AttendanceService
from ams.services.course_service import CourseService
from ams.services.enrollment_service import EnrollmentService

RECENT_ATTENDANCE_LIMIT = 5


class DashboardService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.courses = CourseService(uow)
        self.enrollments = EnrollmentService(uow)
        self.attendance = AttendanceService(uow)

    @service_operation('loading dashboard')
    def for_user(self, user_id: int, role: UserRole) -> ServiceResult:
        if role == UserRole.STUDENT:
            return self._student_dashboard(user_id)
        if role == UserRole.TEACHER:
            return self._course_dashboard(role, self.courses.get_teacher_courses(user_id))
        return self._course_dashboard(role, self.courses.get_all_courses())

    def _student_dashboard(self, user_id: int) -> ServiceResult:
        enrollments = self.enrollments.get_student_enrollments(user_id)
        if not enrollments.success:
            return enrollments
        attendance = self.attendance.get_student_attendance(user_id)
        if not attendance.success:
            return attendance

        return ServiceResult.ok(DashboardResponse(
            role=UserRole.STUDENT,
            enrollments=enrollments.data,
            recent_attendance=attendance.data[:RECENT_ATTENDANCE_LIMIT],
            total_courses=len(enrollments.data),
        ))

    def _course_dashboard(self, role: UserRole, courses: ServiceResult) -> ServiceResult:
        if not courses.success:
            return courses

        return ServiceResult.ok(DashboardResponse(
            role=role,
            courses=courses.data,
            total_courses=len(courses.data),
            total_students=sum(course.enrolled_students for course in courses.data),
        ))
