import uuid
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from .database import Base


class Booking(Base):
    """Customer site-visit slot booked through the bot."""
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True, index=True)
    slot_time = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    # 'pending' | 'confirmed' | 'cancelled' | 'completed'
    status = Column(String, nullable=True, default="pending", index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())
