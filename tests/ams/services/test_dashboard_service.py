from datetime import date, timedelta

from ams.models.attendance import Attendance
from ams.models.enums import AttendanceStatus, UserRole
from ams.services.dashboard_service import RECENT_ATTENDANCE_LIMIT, DashboardService


def test_student_dashboard_shows_recent_attendance(uow, db_session, make_user, make_course, enroll_student) -> None:
    teacher = make_user(role=UserRole.TEACHER)
    student = make_user()
    course = make_course(teacher)
    enroll_student(student, course)
    for offset in range(RECENT_ATTENDANCE_LIMIT + 2):
        db_session.add(Attendance(
            student_id=student.id,
            course_id=course.id,
            date=date(2026, 3, 1) + timedelta(days=offset),
            status=AttendanceStatus.PRESENT,
            marked_by=teacher.id,
        ))
    db_session.commit()

    result = DashboardService(uow).for_user(student.id, UserRole.STUDENT)

    assert result.success
    assert result.data.total_courses == 1
    assert len(result.data.recent_attendance) == RECENT_ATTENDANCE_LIMIT
    assert result.data.recent_attendance[0].date == date(2026, 3, 7)


def test_teacher_dashboard_counts_own_courses_and_students(
    uow, make_user, make_course, enroll_student
) -> None:
    teacher = make_user(role=UserRole.TEACHER)
    other = make_user(role=UserRole.TEACHER)
    first = make_course(teacher)
    second = make_course(teacher)
    make_course(other)
    enroll_student(make_user(), first)
    enroll_student(make_user(), second)
    enroll_student(make_user(), second)

    teacher_view = DashboardService(uow).for_user(teacher.id, UserRole.TEACHER).data
    admin_view = DashboardService(uow).for_user(0, UserRole.ADMIN).data

    assert teacher_view.total_courses == 2
    assert teacher_view.total_students == 3
    assert admin_view.total_courses == 3
