from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator

from ams.models.enums import UserRole
from ams.schemas.common import normalize_email, normalize_person_name, normalize_registration_number


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str | None = None
    role: UserRole = UserRole.STUDENT
    registration_number: str | None = None

    @field_validator('first_name')
    @classmethod
    def validate_first_name(cls, value: str) -> str:
        return normalize_person_name(value, 'First name')

    @field_validator('last_name')
    @classmethod
    def validate_last_name(cls, value: str) -> str:
        return normalize_person_name(value, 'Last name')

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        return value

    @field_validator('registration_number')
    @classmethod
    def validate_registration_number(cls, value: str | None) -> str | None:
        return normalize_registration_number(value)

    @model_validator(mode='after')
    def validate_confirmation(self) -> 'RegisterRequest':
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError('Passwords do not match.')
        return self


class RevokeTokenRequest(BaseModel):
    refresh_token: str


class UserSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    registration_number: str | None = None

    class Config:
        from_attributes = True


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: datetime
    user: UserSummary


class SessionResponse(BaseModel):
    """What the HTTP layer returns; the tokens themselves travel in cookies."""

    expires_at: datetime
    user: UserSummary
