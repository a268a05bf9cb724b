import pytest

from ams.core.result import ErrorKind
from ams.models.enums import RecordStatus, UserRole
from ams.schemas.auth import LoginRequest, RegisterRequest
from ams.schemas.user import UserUpdateRequest
from ams.services.auth_service import AuthService
from ams.services.user_service import UserService


@pytest.fixture
def user_service(uow) -> UserService:
    return UserService(uow)


def test_create_user_allows_admin_accounts(user_service, uow) -> None:
    result = user_service.create_user(RegisterRequest(
        first_name='Second',
        last_name='Admin',
        email='second.admin@ams.com',
        password='Admin@1234',
        role=UserRole.ADMIN,
    ))

    assert result.success
    assert result.data.role == UserRole.ADMIN
    assert uow.refresh_tokens.find() == []


def test_list_users_hides_deactivated_accounts(user_service, make_user) -> None:
    active = make_user()
    make_user(status=RecordStatus.INACTIVE)

    assert [user.id for user in user_service.list_users().data] == [active.id]


def test_update_user_rejects_email_of_another_account(user_service, make_user) -> None:
    make_user(email='taken@ams.com')
    user = make_user()

    result = user_service.update_user(user.id, UserUpdateRequest(
        first_name='Alice',
        last_name='Brown',
        email='TAKEN@ams.com',
        role=UserRole.STUDENT,
    ))

    assert result.kind == ErrorKind.CONFLICT


def test_update_user_changes_profile(user_service, make_user) -> None:
    user = make_user(registration_number='2024-CS-001')

    result = user_service.update_user(user.id, UserUpdateRequest(
        first_name='  Alice ',
        last_name='Brown',
        email='alice.brown@ams.com',
        role=UserRole.STUDENT,
        registration_number=' 2024-cs-001 ',
    ))

    assert result.success
    assert result.data.first_name == 'Alice'
    assert result.data.registration_number == '2024-CS-001'
    assert result.data.updated_at is not None


def _update(role: UserRole, registration_number: str | None = None) -> UserUpdateRequest:
    return UserUpdateRequest(
        first_name='Sam',
        last_name='Taylor',
        email='sam.taylor@ams.com',
        role=role,
        registration_number=registration_number,
    )


def test_update_user_to_student_requires_registration_number(user_service, make_user) -> None:
    user = make_user(role=UserRole.ADMIN)

    result = user_service.update_user(user.id, _update(UserRole.STUDENT))

    assert result.kind == ErrorKind.VALIDATION
    assert result.message == 'Registration number is required for students'


def test_update_user_rejects_registration_number_of_another_student(user_service, make_user) -> None:
    make_user(registration_number='2024-CS-001')
    user = make_user(role=UserRole.ADMIN)

    result = user_service.update_user(user.id, _update(UserRole.STUDENT, '2024-CS-001'))

    assert result.kind == ErrorKind.CONFLICT
    assert result.message == 'Registration number already exists'


def test_update_user_clears_registration_number_for_staff(user_service, make_user, uow) -> None:
    user = make_user(registration_number='2024-CS-001')

    result = user_service.update_user(user.id, _update(UserRole.TEACHER, '2024-CS-001'))

    assert result.success
    assert result.data.registration_number is None
    assert uow.users.get_by_registration_number('2024-CS-001') is None


def test_update_user_keeps_teacher_who_owns_active_courses(user_service, make_user, make_course, uow) -> None:
    teacher = make_user(role=UserRole.TEACHER)
    course = make_course(teacher)

    result = user_service.update_user(teacher.id, _update(UserRole.STUDENT, '2024-CS-050'))

    assert result.kind == ErrorKind.CONFLICT
    assert uow.users.get_by_id(teacher.id).role == UserRole.TEACHER
    assert uow.courses.get_by_id(course.id).teacher_id == teacher.id


def test_update_user_demotes_teacher_without_active_courses(user_service, make_user, make_course) -> None:
    teacher = make_user(role=UserRole.TEACHER)
    make_course(teacher, status=RecordStatus.INACTIVE)

    result = user_service.update_user(teacher.id, _update(UserRole.STUDENT, '2024-CS-050'))

    assert result.success
    assert result.data.role == UserRole.STUDENT
    assert result.data.registration_number == '2024-CS-050'


def test_deactivate_user_ends_sessions(user_service, make_user, uow, token_service, jwt_settings) -> None:
    user = make_user(email='alice.brown@ams.com')
    auth_service = AuthService(uow, token_service, jwt_settings)
    pair = auth_service.login(LoginRequest(email='alice.brown@ams.com', password='Secret@123')).data

    assert user_service.deactivate_user(user.id).success

    assert not auth_service.refresh_token(pair.refresh_token).success
    assert not auth_service.login(LoginRequest(email='alice.brown@ams.com', password='Secret@123')).success
    assert user_service.deactivate_user(999).kind == ErrorKind.NOT_FOUND
