"""
Purchasing: vendors, material catalogue, authorised signatories and
purchase orders with their line items.
"""

import uuid
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    contact_person = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    gst_number = Column(String, nullable=False)
    material_groups = Column(ARRAY(String).with_variant(JSON(), "sqlite"), nullable=False, default=list)
    is_active = Column(Boolean, nullable=True, default=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())


class Material(Base):
    __tablename__ = "materials"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False)
    material_group = Column(String, nullable=False, index=True)
    terms = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=True, default=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())


class AuthorizedPerson(Base):
    __tablename__ = "authorized_persons"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    position = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=True, default=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    po_number = Column(String, nullable=False, unique=True, index=True)
    po_date = Column(Date, nullable=False)
    vendor_id = Column(UUID(as_uuid=True), ForeignKey("vendors.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    # 'draft' | 'sent' | 'confirmed' | 'delivered' | 'cancelled'
    status = Column(String, nullable=True, default="draft", index=True)
    delivery_date = Column(Date, nullable=True)
    delivery_time = Column(String, nullable=True)
    material_terms = Column(Text, nullable=True)

    contact_person_id = Column(UUID(as_uuid=True), ForeignKey("authorized_persons.id", ondelete="SET NULL"), nullable=True)
    ordered_by_id = Column(UUID(as_uuid=True), ForeignKey("authorized_persons.id", ondelete="SET NULL"), nullable=True)
    confirmed_by_id = Column(UUID(as_uuid=True), ForeignKey("authorized_persons.id", ondelete="SET NULL"), nullable=True)

    total_amount = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    vendor = relationship("Vendor")
    items = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.item_order",
    )


class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    purchase_order_id = Column(
        UUID(as_uuid=True),
        ForeignKey("purchase_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    material_id = Column(UUID(as_uuid=True), ForeignKey("materials.id", ondelete="RESTRICT"), nullable=False)
    item_order = Column(Integer, nullable=False)
    quantity = Column(Float, nullable=False)
    rate = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now())

    purchase_order = relationship("PurchaseOrder", back_populates="items")
    material = relationship("Material")
