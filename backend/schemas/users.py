from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi_users import schemas
from pydantic import BaseModel, field_validator

from schemas.common import ORMModel, strip_optional, strip_required


# Dashboard operator accounts (fastapi-users)

class AdminRead(schemas.BaseUser[UUID]):
    pass


class AdminCreate(schemas.BaseUserCreate):
    pass


class AdminUpdate(schemas.BaseUserUpdate):
    pass


# Field workers

class UserRead(ORMModel):
    id: UUID
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str
    is_verified: Optional[bool] = None
    verified_at: Optional[datetime] = None
    introduction_sent: Optional[bool] = None
    introduction_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "employee"
    is_verified: bool = False

    @field_validator("phone", "role")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("name", "email")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class UserUpdate(BaseModel):
    phone: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    is_verified: Optional[bool] = None

    @field_validator("phone", "role")
    @classmethod
    def _not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)
