import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)
    unit = Column(Text, nullable=False)
    # 'active' | 'inactive' | 'discontinued'
    status = Column(Text, nullable=True, default="active")
    item_code = Column(String, nullable=True, index=True)

    gujarati_name = Column(String, nullable=True)
    gujarati_category = Column(String, nullable=True)
    gujarati_unit = Column(String, nullable=True)

    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    transactions = relationship("InventoryTransaction", back_populates="item", passive_deletes=True)
