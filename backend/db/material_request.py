import uuid
from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class MaterialRequest(Base):
    __tablename__ = "material_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey("sites.id", ondelete="SET NULL"), nullable=True, index=True)

    material_name = Column(String, nullable=True)
    quantity = Column(Float, nullable=True)
    unit = Column(String, nullable=True)
    # 'low' | 'medium' | 'high'
    urgency = Column(String, nullable=True)
    # 'pending' | 'approved' | 'rejected' | 'fulfilled'
    status = Column(String, nullable=True, default="pending", index=True)
    requested_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    image_key = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)

    user = relationship("User")
    site = relationship("Site")
