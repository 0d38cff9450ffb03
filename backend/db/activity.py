import uuid
from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Activity(Base):
    """Work log entry reported from a site."""
    __tablename__ = "activities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey("sites.id", ondelete="SET NULL"), nullable=True, index=True)

    activity_type = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    hours = Column(Float, nullable=True)
    details = Column(JSON, nullable=True)
    image_key = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)

    user = relationship("User")
    site = relationship("Site")
