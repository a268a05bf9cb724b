import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-with-at-least-32-bytes!!')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ams.auth import passwords  # noqa: E402
from ams.auth.dependencies import get_token_service  # noqa: E402
from ams.auth.jwt_handler import TokenService  # noqa: E402
from ams.core.clock import utc_now  # noqa: E402
from ams.core.config import JwtSettings  # noqa: E402
from ams.database import create_tables, ensure_unique_indexes, get_db  # noqa: E402
from ams.main import app  # noqa: E402
from ams.models.course import Course  # noqa: E402
from ams.models.enrollment import Enrollment  # noqa: E402
from ams.models.enums import RecordStatus, UserRole  # noqa: E402
from ams.models.user import User  # noqa: E402
from ams.repositories import UnitOfWork  # noqa: E402

DEFAULT_PASSWORD = 'Secret@123'
DEFAULT_PASSWORD_HASH = passwords.hash_password(DEFAULT_PASSWORD)


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    ensure_unique_indexes(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def uow(db_session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture
def jwt_settings() -> JwtSettings:
    return JwtSettings(
        secret_key='unit-test-signing-key-0123456789abcdef',
        issuer='AMS',
        audience='AMS.Web',
        access_token_expires_minutes=60,
        refresh_token_expires_days=7,
    )


@pytest.fixture
def token_service(jwt_settings) -> TokenService:
    return TokenService(jwt_settings)


@pytest.fixture
def make_user(db_session):
    counter = {'value': 0}

    def factory(
        role: UserRole = UserRole.STUDENT,
        first_name: str = 'Test',
        last_name: str = 'User',
        email: str | None = None,
        registration_number: str | None = None,
        status: RecordStatus = RecordStatus.ACTIVE,
    ) -> User:
        counter['value'] += 1
        number = counter['value']
        if registration_number is None and role == UserRole.STUDENT:
            registration_number = f'2024-CS-{number:03d}'
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email or f'user{number}@ams.com',
            password_hash=DEFAULT_PASSWORD_HASH,
            role=role,
            registration_number=registration_number,
            status=status,
            created_at=utc_now(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return factory


@pytest.fixture
def make_course(db_session):
    counter = {'value': 100}

    def factory(
        teacher: User,
        course_code: str | None = None,
        course_name: str = 'Data Structures',
        status: RecordStatus = RecordStatus.ACTIVE,
    ) -> Course:
        counter['value'] += 1
        course = Course(
            course_code=course_code or f'CSE-{counter["value"]}',
            course_name=course_name,
            description='',
            credit_hours=3,
            teacher_id=teacher.id,
            status=status,
            created_at=utc_now(),
        )
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        return course

    return factory


@pytest.fixture
def enroll_student(db_session):
    def factory(student: User, course: Course) -> Enrollment:
        enrollment = Enrollment(
            student_id=student.id,
            course_id=course.id,
            status=RecordStatus.ACTIVE,
            enrolled_at=utc_now(),
        )
        db_session.add(enrollment)
        db_session.commit()
        db_session.refresh(enrollment)
        return enrollment

    return factory


@pytest.fixture
def client_factory(db_engine, token_service):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_service] = lambda: token_service

    # One client per signed-in user so each keeps its own cookie jar.
    def factory() -> TestClient:
        return TestClient(app)

    try:
        yield factory
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def register_account():
    def register(client: TestClient, first_name: str, email: str, role: str = 'Student', registration_number=None):
        payload = {
            'first_name': first_name,
            'last_name': 'Tester',
            'email': email,
            'password': 'Secret@123',
            'confirm_password': 'Secret@123',
            'role': role,
        }
        if registration_number:
            payload['registration_number'] = registration_number
        return client.post('/auth/register', json=payload)

    return register
