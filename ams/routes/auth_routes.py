from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ams.auth.dependencies import get_current_identity, get_token_service, get_uow, require_roles
from ams.auth.jwt_handler import TokenClaims, TokenService
from ams.core import config
from ams.core.config import JwtSettings
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import message_response, raise_for_result
from ams.schemas.auth import LoginRequest, RegisterRequest, RevokeTokenRequest, SessionResponse, TokenPair
from ams.schemas.user import UserResponse
from ams.services.auth_service import AuthService

router = APIRouter(tags=['auth'])


def get_auth_service(
    uow: UnitOfWork = Depends(get_uow),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(uow, token_service, token_service.settings)


def set_auth_cookies(response: Response, token_pair: TokenPair, settings: JwtSettings) -> None:
    response.set_cookie(
        key=config.ACCESS_TOKEN_COOKIE_NAME,
        value=token_pair.access_token,
        max_age=settings.access_token_expires_minutes * 60,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite='lax',
    )
    response.set_cookie(
        key=config.REFRESH_TOKEN_COOKIE_NAME,
        value=token_pair.refresh_token,
        max_age=settings.refresh_token_expires_days * 24 * 60 * 60,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite='lax',
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(config.ACCESS_TOKEN_COOKIE_NAME)
    response.delete_cookie(config.REFRESH_TOKEN_COOKIE_NAME)


def start_session(response: Response, token_pair: TokenPair, settings: JwtSettings) -> SessionResponse:
    set_auth_cookies(response, token_pair, settings)
    return SessionResponse(expires_at=token_pair.expires_at, user=token_pair.user)


@router.post('/login', response_model=SessionResponse)
def login(data: LoginRequest, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    token_pair = raise_for_result(auth_service.login(data))
    return start_session(response, token_pair, auth_service.settings)


@router.post('/register', response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    if data.role == UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Admin accounts can only be created by an administrator.',
        )

    token_pair = raise_for_result(auth_service.register(data))
    return start_session(response, token_pair, auth_service.settings)


@router.post('/refresh', response_model=SessionResponse)
def refresh(request: Request, response: Response, auth_service: AuthService = Depends(get_auth_service)):
    result = auth_service.refresh_token(
        request.cookies.get(config.REFRESH_TOKEN_COOKIE_NAME),
        access_token=request.cookies.get(config.ACCESS_TOKEN_COOKIE_NAME),
    )
    token_pair = raise_for_result(result)
    return start_session(response, token_pair, auth_service.settings)


@router.post('/logout')
def logout(
    response: Response,
    identity: TokenClaims = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
):
    body = message_response(auth_service.logout(identity.user_id))
    clear_auth_cookies(response)
    return body


@router.post('/revoke')
def revoke(
    data: RevokeTokenRequest,
    _admin: TokenClaims = Depends(require_roles(UserRole.ADMIN)),
    auth_service: AuthService = Depends(get_auth_service),
):
    return message_response(auth_service.revoke_token(data.refresh_token))


@router.get('/me')
def me(identity: TokenClaims = Depends(get_current_identity)):
    return {
        'id': identity.user_id,
        'email': identity.email,
        'name': identity.full_name,
        'role': identity.role,
        'registration_number': identity.registration_number,
    }


@router.get('/teachers', response_model=list[UserResponse])
def list_teachers(
    _identity: TokenClaims = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
):
    return raise_for_result(auth_service.get_all_teachers())
