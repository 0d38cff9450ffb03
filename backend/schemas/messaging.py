from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from schemas.common import ORMModel


class MessageLogRead(ORMModel):
    id: UUID
    phone: Optional[str] = None
    direction: Optional[str] = None
    message_type: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Any] = Field(default=None, validation_alias="meta")
    created_at: Optional[datetime] = None


class ConversationSessionRead(ORMModel):
    phone: str
    intent: Optional[str] = None
    step: Optional[str] = None
    data: Optional[Any] = None
    updated_at: Optional[datetime] = None


class EmployeeOtpRead(ORMModel):
    """Never carries `otp_hash`."""
    phone: str
    attempts: Optional[int] = None
    expires_at: datetime
    created_at: Optional[datetime] = None
    is_expired: bool = False
