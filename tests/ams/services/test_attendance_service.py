from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from ams.core.result import ErrorKind
from ams.models.attendance import Attendance
from ams.models.enums import AttendanceStatus, RecordStatus, UserRole
from ams.schemas.attendance import AttendanceUpdateRequest, MarkAttendanceRequest, StudentAttendanceEntry
from ams.services.attendance_service import (
    AttendanceService,
    already_marked_message,
    calculate_attendance_percentage,
    summarize_attendance,
)

CLASS_DAY = date(2026, 3, 2)


@pytest.fixture
def attendance_service(uow) -> AttendanceService:
    return AttendanceService(uow)


@pytest.fixture
def classroom(make_user, make_course, enroll_student):
    teacher = make_user(role=UserRole.TEACHER, email='john.smith@ams.com')
    course = make_course(teacher, course_code='CSE-101')
    students = [make_user(first_name=name, last_name='Student') for name in ('Alice', 'Bob')]
    for student in students:
        enroll_student(student, course)
    return SimpleNamespace(teacher=teacher, course=course, students=students)


def _request(course_id: int, student_ids, on_date: date = CLASS_DAY, status=AttendanceStatus.PRESENT):
    return MarkAttendanceRequest(
        course_id=course_id,
        date=on_date,
        students=[StudentAttendanceEntry(student_id=student_id, status=status) for student_id in student_ids],
    )


def _record(on_date: date, status: AttendanceStatus):
    return SimpleNamespace(date=on_date, status=status)


def test_percentage_counts_late_as_attended() -> None:
    records = (
        [_record(CLASS_DAY + timedelta(days=i), AttendanceStatus.PRESENT) for i in range(7)]
        + [_record(CLASS_DAY + timedelta(days=7), AttendanceStatus.LATE)]
        + [_record(CLASS_DAY + timedelta(days=8 + i), AttendanceStatus.ABSENT) for i in range(2)]
    )

    summary = summarize_attendance(records)

    assert summary.total_classes == 10
    assert summary.present_count == 7
    assert summary.late_count == 1
    assert summary.absent_count == 2
    assert summary.attendance_percentage == 80.0


def test_percentage_is_zero_without_classes() -> None:
    assert calculate_attendance_percentage(0, 0, 0) == 0.0
    assert summarize_attendance([]).attendance_percentage == 0.0


@pytest.mark.parametrize(
    ('total', 'present', 'late', 'expected'),
    [
        (3, 2, 0, 66.67),
        (3, 1, 0, 33.33),
        (6, 6, 0, 100.0),
        (8, 0, 1, 12.5),
    ],
)
def test_percentage_rounds_to_two_decimals(total, present, late, expected) -> None:
    assert calculate_attendance_percentage(total, present, late) == expected


def test_summarize_applies_inclusive_date_range() -> None:
    records = [
        _record(date(2026, 3, 1), AttendanceStatus.ABSENT),
        _record(date(2026, 3, 2), AttendanceStatus.PRESENT),
        _record(date(2026, 3, 3), AttendanceStatus.LATE),
        _record(date(2026, 3, 4), AttendanceStatus.ABSENT),
    ]

    summary = summarize_attendance(records, start_date=date(2026, 3, 2), end_date=date(2026, 3, 3))

    assert summary.total_classes == 2
    assert summary.attendance_percentage == 100.0


def test_mark_attendance_writes_one_row_per_student(attendance_service, classroom, uow) -> None:
    student_ids = [student.id for student in classroom.students]

    result = attendance_service.mark_attendance(_request(classroom.course.id, student_ids), classroom.teacher.id)

    assert result.success
    rows = uow.attendance.find(Attendance.course_id == classroom.course.id)
    assert sorted(row.student_id for row in rows) == sorted(student_ids)
    assert {row.marked_by for row in rows} == {classroom.teacher.id}


def test_mark_attendance_rejects_teacher_who_does_not_own_course(
    attendance_service, classroom, make_user, uow
) -> None:
    other_teacher = make_user(role=UserRole.TEACHER)

    result = attendance_service.mark_attendance(
        _request(classroom.course.id, [classroom.students[0].id]),
        other_teacher.id,
    )

    assert result.kind == ErrorKind.AUTHORIZATION
    assert uow.attendance.find() == []


def test_mark_attendance_rejects_whole_batch_with_unenrolled_student(
    attendance_service, classroom, make_user, uow
) -> None:
    outsider = make_user(first_name='Eve')
    student_ids = [classroom.students[0].id, outsider.id]

    result = attendance_service.mark_attendance(_request(classroom.course.id, student_ids), classroom.teacher.id)

    assert result.kind == ErrorKind.VALIDATION
    assert result.message == f'Student ID {outsider.id} is not enrolled in this course'
    assert not uow.attendance.exists_for_course_on_date(classroom.course.id, CLASS_DAY)


def test_mark_attendance_rejects_second_submission_for_same_date(attendance_service, classroom, uow) -> None:
    first_student, second_student = classroom.students
    assert attendance_service.mark_attendance(
        _request(classroom.course.id, [first_student.id]),
        classroom.teacher.id,
    ).success

    result = attendance_service.mark_attendance(
        _request(classroom.course.id, [second_student.id]),
        classroom.teacher.id,
    )

    assert result.kind == ErrorKind.CONFLICT
    assert result.message == already_marked_message(CLASS_DAY)
    assert len(uow.attendance.find(Attendance.course_id == classroom.course.id)) == 1


def test_mark_attendance_conflict_from_unique_index(attendance_service, classroom, uow, monkeypatch) -> None:
    first_student, second_student = classroom.students
    assert attendance_service.mark_attendance(
        _request(classroom.course.id, [first_student.id]),
        classroom.teacher.id,
    ).success
    # Simulate a concurrent submission that committed after the date check ran.
    monkeypatch.setattr(uow.attendance, 'exists_for_course_on_date', lambda course_id, on_date: False)

    result = attendance_service.mark_attendance(
        _request(classroom.course.id, [second_student.id, first_student.id]),
        classroom.teacher.id,
    )

    assert result.kind == ErrorKind.CONFLICT
    assert result.message == already_marked_message(CLASS_DAY)
    rows = uow.attendance.find(Attendance.course_id == classroom.course.id)
    assert [row.student_id for row in rows] == [first_student.id]


def test_mark_attendance_rejects_duplicate_student_in_batch(attendance_service, classroom, uow) -> None:
    student_id = classroom.students[0].id

    result = attendance_service.mark_attendance(
        _request(classroom.course.id, [student_id, student_id]),
        classroom.teacher.id,
    )

    assert result.kind == ErrorKind.VALIDATION
    assert uow.attendance.find() == []


def test_mark_attendance_rejects_student_who_unenrolled(attendance_service, classroom, uow, db_session) -> None:
    enrollment = uow.enrollments.get_active(classroom.students[1].id, classroom.course.id)
    enrollment.status = RecordStatus.INACTIVE
    db_session.commit()

    result = attendance_service.mark_attendance(
        _request(classroom.course.id, [classroom.students[1].id]),
        classroom.teacher.id,
    )

    assert result.kind == ErrorKind.VALIDATION


def test_mark_attendance_unknown_course(attendance_service, classroom) -> None:
    result = attendance_service.mark_attendance(_request(999, [classroom.students[0].id]), classroom.teacher.id)

    assert result.kind == ErrorKind.NOT_FOUND


def test_update_attendance_changes_status_and_remarks(attendance_service, classroom, uow) -> None:
    student = classroom.students[0]
    attendance_service.mark_attendance(_request(classroom.course.id, [student.id]), classroom.teacher.id)
    record = uow.attendance.first(Attendance.student_id == student.id)
    marked_at = record.marked_at

    result = attendance_service.update_attendance(
        record.id,
        AttendanceUpdateRequest(status=AttendanceStatus.LATE, remarks='  Bus delay  '),
        classroom.teacher.id,
    )

    assert result.success
    assert result.data.status == AttendanceStatus.LATE
    assert result.data.remarks == 'Bus delay'
    assert result.data.student_name == student.full_name
    assert uow.attendance.get_by_id(record.id).marked_at == marked_at


def test_update_attendance_requires_course_owner(attendance_service, classroom, make_user, uow) -> None:
    student = classroom.students[0]
    attendance_service.mark_attendance(_request(classroom.course.id, [student.id]), classroom.teacher.id)
    record = uow.attendance.first(Attendance.student_id == student.id)
    intruder = make_user(role=UserRole.TEACHER)

    result = attendance_service.update_attendance(
        record.id,
        AttendanceUpdateRequest(status=AttendanceStatus.ABSENT),
        intruder.id,
    )

    assert result.kind == ErrorKind.AUTHORIZATION


def test_student_attendance_is_newest_first(attendance_service, classroom) -> None:
    student = classroom.students[0]
    for offset in range(3):
        attendance_service.mark_attendance(
            _request(classroom.course.id, [student.id], on_date=CLASS_DAY + timedelta(days=offset)),
            classroom.teacher.id,
        )

    result = attendance_service.get_student_attendance(student.id)

    assert [item.date for item in result.data] == [
        CLASS_DAY + timedelta(days=2),
        CLASS_DAY + timedelta(days=1),
        CLASS_DAY,
    ]
    assert result.data[0].course_name == 'Data Structures'


def test_course_attendance_filters_by_date_and_owner(attendance_service, classroom, make_user) -> None:
    student_ids = [student.id for student in classroom.students]
    attendance_service.mark_attendance(_request(classroom.course.id, student_ids), classroom.teacher.id)
    attendance_service.mark_attendance(
        _request(classroom.course.id, student_ids, on_date=CLASS_DAY + timedelta(days=1)),
        classroom.teacher.id,
    )

    result = attendance_service.get_course_attendance(classroom.course.id, CLASS_DAY, classroom.teacher.id)
    assert len(result.data) == 2
    assert {item.date for item in result.data} == {CLASS_DAY}

    stranger = make_user(role=UserRole.TEACHER)
    denied = attendance_service.get_course_attendance(classroom.course.id, teacher_id=stranger.id)
    assert denied.kind == ErrorKind.AUTHORIZATION
