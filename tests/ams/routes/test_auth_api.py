from ams.core import config


def test_health_check(client_factory) -> None:
    response = client_factory().get('/')

    assert response.status_code == 200


def test_register_sets_cookies_and_me_reads_them(client_factory, register_account) -> None:
    client = client_factory()

    response = register_account(client, 'Alice', 'alice@ams.com', registration_number='2024-CS-001')

    assert response.status_code == 201
    body = response.json()
    assert body['user']['email'] == 'alice@ams.com'
    assert 'access_token' not in body
    assert client.cookies.get(config.ACCESS_TOKEN_COOKIE_NAME)
    assert client.cookies.get(config.REFRESH_TOKEN_COOKIE_NAME)

    me = client.get('/auth/me')
    assert me.status_code == 200
    assert me.json()['role'] == 'Student'
    assert me.json()['registration_number'] == '2024-CS-001'


def test_bearer_header_is_accepted(client_factory, register_account, token_service, uow) -> None:
    register_account(client_factory(), 'Alice', 'alice@ams.com', registration_number='2024-CS-001')
    user = uow.users.get_by_email('alice@ams.com')
    token = token_service.issue_access_token(user)

    response = client_factory().get('/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 200
    assert response.json()['email'] == 'alice@ams.com'


def test_self_registration_cannot_create_admin(client_factory, register_account) -> None:
    response = register_account(client_factory(), 'Mallory', 'mallory@ams.com', role='Admin')

    assert response.status_code == 403


def test_register_validation_errors(client_factory, register_account) -> None:
    client = client_factory()

    missing_number = register_account(client, 'Alice', 'alice@ams.com')
    bad_email = register_account(client, 'Alice', 'not-an-email', registration_number='2024-CS-001')

    assert missing_number.status_code == 400
    assert missing_number.json()['detail']['message'] == 'Registration number is required for students'
    assert bad_email.status_code == 422


def test_login_with_wrong_password_is_unauthorized(client_factory, register_account) -> None:
    register_account(client_factory(), 'Alice', 'alice@ams.com', registration_number='2024-CS-001')

    response = client_factory().post('/auth/login', json={'email': 'alice@ams.com', 'password': 'Wrong@1234'})

    assert response.status_code == 401
    assert response.json()['detail']['message'] == 'Invalid email or password'


def test_refresh_rotates_cookie_and_logout_clears_session(client_factory, register_account) -> None:
    client = client_factory()
    register_account(client, 'Alice', 'alice@ams.com', registration_number='2024-CS-001')
    first_refresh = client.cookies.get(config.REFRESH_TOKEN_COOKIE_NAME)

    refreshed = client.post('/auth/refresh')

    assert refreshed.status_code == 200
    assert client.cookies.get(config.REFRESH_TOKEN_COOKIE_NAME) != first_refresh

    replay = client_factory()
    replay.cookies.set(config.REFRESH_TOKEN_COOKIE_NAME, first_refresh)
    assert replay.post('/auth/refresh').status_code == 401

    assert client.post('/auth/logout').status_code == 200
    assert client.get('/auth/me').status_code == 401
    assert client.post('/auth/refresh').status_code == 401


def test_refresh_without_cookie_is_unauthorized(client_factory) -> None:
    assert client_factory().post('/auth/refresh').status_code == 401


def test_teachers_listing_requires_login(client_factory, register_account) -> None:
    anonymous = client_factory()
    student = client_factory()
    register_account(client_factory(), 'John', 'john@ams.com', role='Teacher')
    register_account(student, 'Alice', 'alice@ams.com', registration_number='2024-CS-001')

    assert anonymous.get('/auth/teachers').status_code == 401
    teachers = student.get('/auth/teachers').json()
    assert [teacher['email'] for teacher in teachers] == ['john@ams.com']
