from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from schemas.common import ORMModel


class CustomerInquiryRead(ORMModel):
    id: UUID
    phone: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    occupation: Optional[str] = None
    office_space_requirement: Optional[str] = None
    office_space_use: Optional[str] = None
    expected_price_range: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


InquiryStatus = Literal["new", "contacted", "qualified", "closed"]


class CustomerInquiryStatusUpdate(BaseModel):
    status: InquiryStatus
