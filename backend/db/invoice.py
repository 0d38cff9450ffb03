import uuid
from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_name = Column(String, nullable=False)
    invoice_description = Column(Text, nullable=False)
    invoice_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=True, default="INR")
    # 'pending' | 'approved' | 'paid' | 'rejected'
    status = Column(String, nullable=True, default="pending", index=True)
    notes = Column(Text, nullable=True)
    image_key = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    site_id = Column(UUID(as_uuid=True), ForeignKey("sites.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    site = relationship("Site")
    user = relationship("User")
