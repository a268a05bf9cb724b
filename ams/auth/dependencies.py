from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ams.auth.jwt_handler import TokenClaims, TokenService
from ams.core import config
from ams.database import get_db
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork

security = HTTPBearer(auto_error=False)


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_token_service() -> TokenService:
    return TokenService(config.get_jwt_settings())


def read_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    token = request.cookies.get(config.ACCESS_TOKEN_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.scheme and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return None


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    claims = token_service.validate_access_token(read_access_token(request, credentials))
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def require_roles(*roles: UserRole):
    allowed = set(roles)

    def dependency(identity: TokenClaims = Depends(get_current_identity)) -> TokenClaims:
        if identity.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return identity

    return dependency
