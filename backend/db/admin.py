from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from .database import Base


class AdminAccount(SQLAlchemyBaseUserTableUUID, Base):
    """Dashboard operator. Signs in with an emailed one-time code."""
    __tablename__ = "admin_accounts"

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "email": self.email,
            "is_active": self.is_active,
            "is_superuser": self.is_superuser,
        }


class EmailOtp(Base):
    """Pending sign-in code for one email address (at most one per address)."""
    __tablename__ = "email_otps"

    email = Column(String(320), primary_key=True)
    code_hash = Column(String(128), nullable=False)
    attempts = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
