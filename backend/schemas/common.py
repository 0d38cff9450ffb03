from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from core.storage import public_image_url


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ImageRead(ORMModel):
    """Rows with an object-storage image; `image_url` is resolved from `image_key`."""
    image_key: Optional[str] = None
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def _resolve_image_url(self):
        resolved = public_image_url(self.image_key)
        if resolved:
            self.image_url = resolved
        return self


class UserBrief(ORMModel):
    id: UUID
    name: Optional[str] = None
    phone: Optional[str] = None


class SiteBrief(ORMModel):
    id: UUID
    name: str
    location: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("status is required")
        return v


class MessageResponse(BaseModel):
    message: str


def strip_required(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("field is required")
    return v


def strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None
