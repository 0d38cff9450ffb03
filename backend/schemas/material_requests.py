from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from schemas.common import ImageRead, SiteBrief, UserBrief


MaterialRequestStatus = Literal["pending", "approved", "rejected", "fulfilled"]
Urgency = Literal["low", "medium", "high"]


class MaterialRequestRead(ImageRead):
    id: UUID
    user_id: Optional[UUID] = None
    site_id: Optional[UUID] = None
    material_name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    urgency: Optional[str] = None
    status: Optional[str] = None
    requested_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    user: Optional[UserBrief] = None
    site: Optional[SiteBrief] = None


class MaterialRequestStatusUpdate(BaseModel):
    status: MaterialRequestStatus


class MaterialRequestUpdate(BaseModel):
    material_name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    urgency: Optional[Urgency] = None
    status: Optional[MaterialRequestStatus] = None
    requested_date: Optional[date] = None
    notes: Optional[str] = None
