"""User model definitions."""

from sqlalchemy import Column, DateTime, Index, Integer, String, text

from ams.core.clock import utc_now
from ams.database import Base
from ams.models.enums import RecordStatus, UserRole, db_enum


class User(Base):
    """Represents an application user (admin, teacher or student)."""
    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_registration_number",
            "registration_number",
            unique=True,
            sqlite_where=text("registration_number IS NOT NULL"),
            postgresql_where=text("registration_number IS NOT NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(db_enum(UserRole), nullable=False)
    registration_number = Column(String(50), nullable=True)  # students only
    status = Column(db_enum(RecordStatus), nullable=False, default=RecordStatus.ACTIVE)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE
