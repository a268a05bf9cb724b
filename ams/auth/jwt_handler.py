import base64
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ams.core.config import JwtSettings
from ams.models.enums import UserRole
from ams.models.user import User

REFRESH_TOKEN_BYTES = 64


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    registration_number: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TokenService:
    def __init__(self, settings: JwtSettings):
        self.settings = settings

    def access_token_expires_at(self, issued_at: datetime | None = None) -> datetime:
        issued_at = issued_at or datetime.now(timezone.utc)
        return issued_at + timedelta(minutes=self.settings.access_token_expires_minutes)

    def issue_access_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "uid": user.id,
            "email": user.email,
            "given_name": user.first_name,
            "family_name": user.last_name,
            "name": user.full_name,
            "role": UserRole(user.role).value,
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": now,
            "exp": self.access_token_expires_at(now),
        }
        if user.registration_number:
            payload["registration_number"] = user.registration_number
        return jwt.encode(payload, self.settings.secret_key, algorithm=self.settings.algorithm)

    def issue_refresh_token(self) -> str:
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def validate_access_token(self, token: str | None) -> TokenClaims | None:
        payload = self._decode(token, verify_exp=True)
        if payload is None:
            return None
        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                email=payload["email"],
                first_name=payload.get("given_name", ""),
                last_name=payload.get("family_name", ""),
                role=UserRole(payload["role"]),
                registration_number=payload.get("registration_number"),
            )
        except (KeyError, TypeError, ValueError):
            return None

    def extract_user_id_ignoring_expiry(self, token: str | None) -> int | None:
        payload = self._decode(token, verify_exp=False)
        if payload is None:
            return None
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None

    def _decode(self, token: str | None, verify_exp: bool) -> dict | None:
        if not token:
            return None
        try:
            return jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                leeway=0,
                options={
                    "verify_exp": verify_exp,
                    "require": ["sub", "iss", "aud", "exp"],
                },
            )
        except jwt.PyJWTError:
            return None
