from fastapi import APIRouter, Depends

from ams.auth.dependencies import get_current_identity, get_uow
from ams.auth.jwt_handler import TokenClaims
from ams.repositories import UnitOfWork
from ams.routes.errors import raise_for_result
from ams.schemas.dashboard import DashboardResponse
from ams.services.dashboard_service import DashboardService

router = APIRouter(tags=['dashboard'])


@router.get('', response_model=DashboardResponse)
def get_dashboard(
    identity: TokenClaims = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_uow),
):
    return raise_for_result(DashboardService(uow).for_user(identity.user_id, identity.role))
