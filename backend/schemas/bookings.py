from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from schemas.common import ORMModel


BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingRead(ORMModel):
    id: UUID
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    slot_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
