from fastapi import APIRouter, Depends, HTTPException, status

from ams.auth.dependencies import get_uow, require_roles
from ams.auth.jwt_handler import TokenClaims
from ams.models.enums import RecordStatus, UserRole
from ams.repositories import UnitOfWork
from ams.routes.errors import message_response, raise_for_result
from ams.schemas.auth import RegisterRequest
from ams.schemas.user import UserResponse, UserUpdateRequest
from ams.services.user_service import UserService

router = APIRouter(tags=['users'])

require_admin = require_roles(UserRole.ADMIN)


def get_user_service(uow: UnitOfWork = Depends(get_uow)) -> UserService:
    return UserService(uow)


def reject_self_lockout(identity: TokenClaims, user_id: int) -> None:
    if identity.user_id == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='You cannot deactivate your own account.',
        )


@router.get('', response_model=list[UserResponse])
def list_users(
    _admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return raise_for_result(user_service.list_users())


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: RegisterRequest,
    _admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return raise_for_result(user_service.create_user(data))


@router.get('/{user_id}', response_model=UserResponse)
def get_user(
    user_id: int,
    _admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    return raise_for_result(user_service.get_user(user_id))


@router.put('/{user_id}', response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdateRequest,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    if data.status == RecordStatus.INACTIVE:
        reject_self_lockout(admin, user_id)
    return raise_for_result(user_service.update_user(user_id, data))


@router.delete('/{user_id}')
def deactivate_user(
    user_id: int,
    admin: TokenClaims = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
):
    reject_self_lockout(admin, user_id)
    return message_response(user_service.deactivate_user(user_id))
