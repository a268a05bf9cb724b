"""Account creation and administrative account management."""

import logging

from ams.auth import passwords
from ams.core.clock import utc_now
from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.enums import RecordStatus, UserRole
from ams.models.user import User
from ams.repositories import UnitOfWork
from ams.schemas.auth import RegisterRequest
from ams.schemas.user import UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def stage_new_user(self, data: RegisterRequest) -> tuple[User | None, ServiceResult | None]:
        """Validate ``data`` and add the new account to the session without committing."""
        if self.uow.users.get_by_email(data.email) is not None:
            return None, ServiceResult.fail('Email already registered', kind=ErrorKind.CONFLICT)

        registration_number = None
        if data.role == UserRole.STUDENT:
            if not data.registration_number:
                return None, ServiceResult.fail(
                    'Registration number is required for students',
                    kind=ErrorKind.VALIDATION,
                )
            if self.uow.users.get_by_registration_number(data.registration_number) is not None:
                return None, ServiceResult.fail('Registration number already exists', kind=ErrorKind.CONFLICT)
            registration_number = data.registration_number

        if not passwords.meets_strength_policy(data.password):
            return None, ServiceResult.fail(
                'Password does not meet the strength policy',
                kind=ErrorKind.VALIDATION,
                errors=[passwords.PASSWORD_POLICY_MESSAGE],
            )

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password_hash=passwords.hash_password(data.password),
            role=data.role,
            registration_number=registration_number,
            status=RecordStatus.ACTIVE,
            created_at=utc_now(),
        )
        self.uow.users.add(user)
        self.uow.flush()
        return user, None

    @service_operation('creating user')
    def create_user(self, data: RegisterRequest) -> ServiceResult:
        user, failure = self.stage_new_user(data)
        if failure is not None:
            return failure

        self.uow.save_changes()

        logger.info('Created %s account %s', user.role.value, user.id)
        return ServiceResult.ok(UserResponse.model_validate(user), 'User created successfully')

    @service_operation('retrieving users')
    def list_users(self) -> ServiceResult:
        users = self.uow.users.active()
        return ServiceResult.ok([UserResponse.model_validate(user) for user in users])

    @service_operation('retrieving user')
    def get_user(self, user_id: int) -> ServiceResult:
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail('User not found', kind=ErrorKind.NOT_FOUND)
        return ServiceResult.ok(UserResponse.model_validate(user))

    @service_operation('updating user')
    def update_user(self, user_id: int, data: UserUpdateRequest) -> ServiceResult:
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail('User not found', kind=ErrorKind.NOT_FOUND)

        existing = self.uow.users.get_by_email(data.email)
        if existing is not None and existing.id != user.id:
            return ServiceResult.fail('Email already registered', kind=ErrorKind.CONFLICT)

        registration_number = None
        if data.role == UserRole.STUDENT:
            if not data.registration_number:
                return ServiceResult.fail(
                    'Registration number is required for students',
                    kind=ErrorKind.VALIDATION,
                )
            taken = self.uow.users.get_by_registration_number(data.registration_number)
            if taken is not None and taken.id != user.id:
                return ServiceResult.fail('Registration number already exists', kind=ErrorKind.CONFLICT)
            registration_number = data.registration_number

        if user.role == UserRole.TEACHER and data.role != UserRole.TEACHER:
            if self.uow.courses.active_for_teacher(user.id):
                return ServiceResult.fail(
                    "Reassign or delete this teacher's active courses before changing their role",
                    kind=ErrorKind.CONFLICT,
                )

        user.first_name = data.first_name
        user.last_name = data.last_name
        user.email = data.email
        user.role = data.role
        user.registration_number = registration_number
        user.status = data.status
        user.updated_at = utc_now()
        self.uow.users.update(user)

        if data.status == RecordStatus.INACTIVE:
            self._revoke_sessions(user.id)

        self.uow.save_changes()
        return ServiceResult.ok(UserResponse.model_validate(user), 'User updated successfully')

    @service_operation('deactivating user')
    def deactivate_user(self, user_id: int) -> ServiceResult:
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            return ServiceResult.fail('User not found', kind=ErrorKind.NOT_FOUND)

        user.status = RecordStatus.INACTIVE
        user.updated_at = utc_now()
        self.uow.users.update(user)
        self._revoke_sessions(user.id)
        self.uow.save_changes()

        logger.info('User %s deactivated', user.id)
        return ServiceResult.ok(True, 'User deactivated successfully')

    def _revoke_sessions(self, user_id: int) -> None:
        now = utc_now()
        for token in self.uow.refresh_tokens.active_for_user(user_id, now):
            token.revoke(now=now)
