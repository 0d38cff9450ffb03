import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Site(Base):
    __tablename__ = "sites"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    location = Column(String, nullable=True)
    # 'active' | 'planning' | 'completed' | 'on_hold'
    status = Column(String, nullable=True, default="active")
    details = Column(JSON, nullable=True)
    image_key = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    assignments = relationship("UserSiteAssignment", back_populates="site", cascade="all, delete-orphan")


class UserSiteAssignment(Base):
    __tablename__ = "user_site_assignments"
    __table_args__ = (UniqueConstraint("user_id", "site_id", name="ux_user_site_assignment"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    site_id = Column(UUID(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=True, default="employee")
    # 'active' | 'inactive' | 'suspended'
    status = Column(String, nullable=True, default="active")
    permissions = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    assigned_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id])
    site = relationship("Site", back_populates="assignments")
