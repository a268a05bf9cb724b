import logging
from datetime import timedelta

from ams.auth import passwords
from ams.auth.jwt_handler import TokenService
from ams.core.clock import utc_now
from ams.core.config import JwtSettings
from ams.core.result import ErrorKind, ServiceResult, service_operation
from ams.models.enums import UserRole
from ams.models.refresh_token import RefreshToken
from ams.models.user import User
from ams.repositories import UnitOfWork
from ams.schemas.auth import LoginRequest, RegisterRequest, TokenPair, UserSummary
from ams.schemas.user import UserResponse
from ams.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'
INVALID_REFRESH_TOKEN_MESSAGE = 'Invalid or expired refresh token'


class AuthService:
    def __init__(self, uow: UnitOfWork, token_service: TokenService, settings: JwtSettings):
        self.uow = uow
        self.token_service = token_service
        self.settings = settings

    @service_operation('logging in')
    def login(self, data: LoginRequest) -> ServiceResult:
        user = self.uow.users.get_by_email(data.email)

        # Unknown account, deactivated account and wrong password look the same to the caller.
        if user is None or not user.is_active or not passwords.verify_password(data.password, user.password_hash):
            logger.warning('Rejected login attempt for %s', data.email)
            return ServiceResult.fail(INVALID_CREDENTIALS_MESSAGE, kind=ErrorKind.AUTHENTICATION)

        token_pair = self._issue_token_pair(user)
        self.uow.save_changes()

        logger.info('User %s logged in', user.id)
        return ServiceResult.ok(token_pair, 'Login successful')

    @service_operation('registering')
    def register(self, data: RegisterRequest) -> ServiceResult:
        user, failure = UserService(self.uow).stage_new_user(data)
        if failure is not None:
            return failure

        # User and refresh token are committed together.
        token_pair = self._issue_token_pair(user)
        self.uow.save_changes()

        logger.info('Registered %s account %s', user.role.value, user.id)
        return ServiceResult.ok(token_pair, 'Registration successful')

    @service_operation('refreshing token')
    def refresh_token(self, refresh_token: str | None, access_token: str | None = None) -> ServiceResult:
        """Rotate ``refresh_token``.

        ``access_token`` is the caller's (possibly expired) access token; when it
        still names a user, that user must own the refresh token.
        """
        if not refresh_token:
            return ServiceResult.fail(INVALID_REFRESH_TOKEN_MESSAGE, kind=ErrorKind.AUTHENTICATION)

        now = utc_now()
        stored = self.uow.refresh_tokens.get_by_token(refresh_token)
        if stored is None or not stored.is_active(now):
            if stored is not None and stored.replaced_by_token:
                logger.warning('Rotated refresh token reused for user %s', stored.user_id)
            return ServiceResult.fail(INVALID_REFRESH_TOKEN_MESSAGE, kind=ErrorKind.AUTHENTICATION)

        if access_token:
            subject_id = self.token_service.extract_user_id_ignoring_expiry(access_token)
            if subject_id is not None and subject_id != stored.user_id:
                logger.warning('Refresh token of user %s presented by user %s', stored.user_id, subject_id)
                return ServiceResult.fail(INVALID_REFRESH_TOKEN_MESSAGE, kind=ErrorKind.AUTHENTICATION)

        user = self.uow.users.get_by_id(stored.user_id)
        if user is None or not user.is_active:
            return ServiceResult.fail('User not found or inactive', kind=ErrorKind.AUTHENTICATION)

        token_pair = self._issue_token_pair(user)
        stored.revoke(now=now, replaced_by=token_pair.refresh_token)
        self.uow.refresh_tokens.update(stored)
        self.uow.save_changes()

        logger.info('Rotated refresh token for user %s', user.id)
        return ServiceResult.ok(token_pair, 'Token refreshed successfully')

    @service_operation('logging out')
    def logout(self, user_id: int) -> ServiceResult:
        now = utc_now()
        active_tokens = self.uow.refresh_tokens.active_for_user(user_id, now)
        for token in active_tokens:
            token.revoke(now=now)
        self.uow.save_changes()

        logger.info('User %s logged out, %d refresh token(s) revoked', user_id, len(active_tokens))
        return ServiceResult.ok(True, 'Logout successful')

    @service_operation('revoking token')
    def revoke_token(self, refresh_token: str) -> ServiceResult:
        stored = self.uow.refresh_tokens.get_by_token(refresh_token)
        if stored is None:
            return ServiceResult.fail('Token not found', kind=ErrorKind.NOT_FOUND)

        stored.revoke()
        self.uow.refresh_tokens.update(stored)
        self.uow.save_changes()

        logger.info('Refresh token %s revoked', stored.id)
        return ServiceResult.ok(True, 'Token revoked successfully')

    @service_operation('retrieving teachers')
    def get_all_teachers(self) -> ServiceResult:
        teachers = self.uow.users.active_with_role(UserRole.TEACHER)
        return ServiceResult.ok([UserResponse.model_validate(teacher) for teacher in teachers])

    def _issue_token_pair(self, user: User) -> TokenPair:
        """Build the access/refresh pair and stage the refresh row on the session."""
        now = utc_now()
        refresh_token = self.token_service.issue_refresh_token()
        self.uow.refresh_tokens.add(
            RefreshToken(
                token=refresh_token,
                user_id=user.id,
                created_at=now,
                expires_at=now + timedelta(days=self.settings.refresh_token_expires_days),
                is_revoked=False,
            )
        )
        return TokenPair(
            access_token=self.token_service.issue_access_token(user),
            refresh_token=refresh_token,
            expires_at=self.token_service.access_token_expires_at(),
            user=UserSummary.model_validate(user),
        )
