"""
WhatsApp bot bookkeeping.

- MessageLog: every inbound/outbound message
- ConversationSession: current intent/step of the conversation with one phone
- EmployeeOtp: pending one-time code for an employee phone (hash only)
"""

import uuid
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from .database import Base


class MessageLog(Base):
    __tablename__ = "message_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    phone = Column(String, nullable=True, index=True)
    # 'inbound' | 'outbound'
    direction = Column(String, nullable=True)
    message_type = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    # `metadata` is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)


class ConversationSession(Base):
    __tablename__ = "sessions"

    phone = Column(String, primary_key=True)
    intent = Column(String, nullable=True)
    step = Column(String, nullable=True)
    data = Column(JSON, nullable=True)

    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now(), index=True)


class EmployeeOtp(Base):
    __tablename__ = "employee_otps"

    phone = Column(String, primary_key=True)
    otp_hash = Column(Text, nullable=False)
    attempts = Column(Integer, nullable=True, default=0)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
