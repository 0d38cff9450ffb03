from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from schemas.common import ImageRead, ORMModel, SiteBrief, UserBrief, strip_optional, strip_required


SiteStatus = Literal["active", "planning", "completed", "on_hold"]
AssignmentStatus = Literal["active", "inactive", "suspended"]


class SiteRead(ImageRead):
    id: UUID
    name: str
    location: Optional[str] = None
    status: Optional[str] = None
    details: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SiteCreate(BaseModel):
    name: str
    location: Optional[str] = None
    status: SiteStatus = "active"
    details: Optional[Any] = None
    image_key: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("location", "image_key")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class SiteUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    status: Optional[SiteStatus] = None
    details: Optional[Any] = None
    image_key: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)


class AssignmentRead(ORMModel):
    id: UUID
    user_id: UUID
    site_id: UUID
    role: Optional[str] = None
    status: Optional[str] = None
    permissions: Optional[Any] = None
    notes: Optional[str] = None
    assigned_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserBrief] = None
    site: Optional[SiteBrief] = None


class AssignmentCreate(BaseModel):
    user_id: UUID
    site_id: UUID
    role: str = "employee"
    status: AssignmentStatus = "active"
    permissions: Optional[Any] = None
    notes: Optional[str] = None
    assigned_by: Optional[UUID] = None

    @field_validator("notes")
    @classmethod
    def _strip_notes(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class AssignmentUpdate(BaseModel):
    user_id: Optional[UUID] = None
    site_id: Optional[UUID] = None
    role: Optional[str] = None
    status: Optional[AssignmentStatus] = None
    permissions: Optional[Any] = None
    notes: Optional[str] = None
