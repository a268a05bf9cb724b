"""Refresh token model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from ams.core.clock import utc_now
from ams.database import Base


class RefreshToken(Base):
    """Opaque refresh token; rotation links each row to its successor."""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True)
    token = Column(String(128), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    expires_at = Column(DateTime, nullable=False)
    is_revoked = Column(Boolean, nullable=False, default=False)
    revoked_at = Column(DateTime, nullable=True)
    replaced_by_token = Column(String(128), nullable=True)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_expired(now)

    def revoke(self, now: datetime | None = None, replaced_by: str | None = None) -> None:
        self.is_revoked = True
        self.revoked_at = now or utc_now()
        if replaced_by is not None:
            self.replaced_by_token = replaced_by
