import pytest

from ams.core import config
from ams.models.enums import UserRole


@pytest.fixture
def admin_client(client_factory, make_user):
    make_user(role=UserRole.ADMIN, email='admin@ams.com')
    client = client_factory()
    response = client.post('/auth/login', json={'email': 'admin@ams.com', 'password': 'Secret@123'})
    assert response.status_code == 200
    return client


def test_admin_creates_and_deactivates_accounts(admin_client, client_factory) -> None:
    created = admin_client.post('/users', json={
        'first_name': 'Sarah',
        'last_name': 'Johnson',
        'email': 'sarah@ams.com',
        'password': 'Secret@123',
        'role': 'Teacher',
    })
    assert created.status_code == 201
    user_id = created.json()['id']

    teacher = client_factory()
    assert teacher.post('/auth/login', json={'email': 'sarah@ams.com', 'password': 'Secret@123'}).status_code == 200

    assert admin_client.delete(f'/users/{user_id}').status_code == 200
    assert teacher.post('/auth/refresh').status_code == 401
    assert [user['email'] for user in admin_client.get('/users').json()] == ['admin@ams.com']


def test_admin_cannot_deactivate_self(admin_client) -> None:
    me = admin_client.get('/auth/me').json()

    response = admin_client.delete(f"/users/{me['id']}")

    assert response.status_code == 400


def test_user_management_is_admin_only(client_factory, register_account) -> None:
    student = client_factory()
    register_account(student, 'Alice', 'alice@ams.com', registration_number='2024-CS-001')

    assert student.get('/users').status_code == 403


def test_admin_revokes_refresh_token(admin_client, client_factory, register_account) -> None:
    student = client_factory()
    register_account(student, 'Alice', 'alice@ams.com', registration_number='2024-CS-001')
    token = student.cookies.get(config.REFRESH_TOKEN_COOKIE_NAME).strip('"')

    assert admin_client.post('/auth/revoke', json={'refresh_token': token}).status_code == 200
    assert student.post('/auth/refresh').status_code == 401
    assert admin_client.post('/auth/revoke', json={'refresh_token': 'missing'}).status_code == 404
