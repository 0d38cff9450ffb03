import uuid
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from .database import Base


class CustomerInquiry(Base):
    """Office-space lead captured by the bot."""
    __tablename__ = "customer_inquiries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    phone = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    occupation = Column(String, nullable=True)
    office_space_requirement = Column(String, nullable=True)
    office_space_use = Column(String, nullable=True)
    expected_price_range = Column(String, nullable=True)
    # 'new' | 'contacted' | 'qualified' | 'closed'
    status = Column(String, nullable=True, default="new")
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())
