from datetime import datetime

from pydantic import BaseModel, field_validator

from ams.models.enums import RecordStatus, UserRole
from ams.schemas.common import normalize_email, normalize_person_name, normalize_registration_number


class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: UserRole
    registration_number: str | None = None
    status: RecordStatus
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class UserUpdateRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    role: UserRole
    registration_number: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE

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

    @field_validator('registration_number')
    @classmethod
    def validate_registration_number(cls, value: str | None) -> str | None:
        return normalize_registration_number(value)
