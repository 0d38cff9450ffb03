from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from schemas.common import ImageRead, SiteBrief, UserBrief


class InvoiceRead(ImageRead):
    id: UUID
    company_name: str
    invoice_description: str
    invoice_date: date
    amount: float
    currency: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    site_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    site: Optional[SiteBrief] = None
    user: Optional[UserBrief] = None


InvoiceStatus = Literal["pending", "approved", "paid", "rejected"]


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus
