import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ams.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:4200"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_ISSUER = os.getenv("JWT_ISSUER", "AMS")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "AMS.Web")
JWT_ACCESS_TOKEN_EXPIRES_MINUTES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MINUTES", "60"))
JWT_REFRESH_TOKEN_EXPIRES_DAYS = int(os.getenv("JWT_REFRESH_TOKEN_EXPIRES_DAYS", "7"))

ACCESS_TOKEN_COOKIE_NAME = os.getenv("ACCESS_TOKEN_COOKIE_NAME", "AccessToken")
REFRESH_TOKEN_COOKIE_NAME = os.getenv("REFRESH_TOKEN_COOKIE_NAME", "RefreshToken")
COOKIE_SECURE = _get_bool(os.getenv("COOKIE_SECURE"), default=False)

SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@ams.com")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "Admin@123")


@dataclass(frozen=True)
class JwtSettings:
    secret_key: str
    algorithm: str = "HS256"
    issuer: str = "AMS"
    audience: str = "AMS.Web"
    access_token_expires_minutes: int = 60
    refresh_token_expires_days: int = 7


def get_jwt_settings() -> JwtSettings:
    return JwtSettings(
        secret_key=JWT_SECRET_KEY,
        algorithm=JWT_ALGORITHM,
        issuer=JWT_ISSUER,
        audience=JWT_AUDIENCE,
        access_token_expires_minutes=JWT_ACCESS_TOKEN_EXPIRES_MINUTES,
        refresh_token_expires_days=JWT_REFRESH_TOKEN_EXPIRES_DAYS,
    )


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if JWT_ACCESS_TOKEN_EXPIRES_MINUTES <= 0 or JWT_REFRESH_TOKEN_EXPIRES_DAYS <= 0:
        raise RuntimeError("Token lifetimes must be positive.")
