from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from core.timefmt import format_ist
from schemas.common import ImageRead, SiteBrief, UserBrief


class ActivityRead(ImageRead):
    id: UUID
    user_id: Optional[UUID] = None
    site_id: Optional[UUID] = None
    activity_type: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[float] = None
    details: Optional[Any] = None
    created_at: Optional[datetime] = None
    created_at_display: Optional[str] = None
    user: Optional[UserBrief] = None
    site: Optional[SiteBrief] = None

    @model_validator(mode="after")
    def _display_time(self):
        self.created_at_display = format_ist(self.created_at)
        return self


class ActivityUpdate(BaseModel):
    activity_type: Optional[str] = None
    description: Optional[str] = None
    hours: Optional[float] = None

    @field_validator("hours")
    @classmethod
    def _hours_non_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("hours must be >= 0")
        return v
