from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from schemas.common import ImageRead, ORMModel, SiteBrief, strip_optional, strip_required


InventoryItemStatus = Literal["active", "inactive", "discontinued"]
TransactionType = Literal["in", "out", "adjustment"]


class InventoryItemRead(ORMModel):
    id: UUID
    name: str
    category: Optional[str] = None
    unit: str
    status: Optional[str] = None
    item_code: Optional[str] = None
    gujarati_name: Optional[str] = None
    gujarati_category: Optional[str] = None
    gujarati_unit: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InventoryItemBrief(ORMModel):
    id: UUID
    name: str
    category: Optional[str] = None
    unit: str


class InventoryItemCreate(BaseModel):
    name: str
    category: Optional[str] = None
    unit: str
    status: InventoryItemStatus = "active"
    item_code: Optional[str] = None
    gujarati_name: Optional[str] = None
    gujarati_category: Optional[str] = None
    gujarati_unit: Optional[str] = None

    @field_validator("name", "unit")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("category", "item_code")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    status: Optional[InventoryItemStatus] = None
    item_code: Optional[str] = None
    gujarati_name: Optional[str] = None
    gujarati_category: Optional[str] = None
    gujarati_unit: Optional[str] = None

    @field_validator("name", "unit")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = (v or "").strip()
        if not v:
            raise ValueError("cannot be empty")
        return v


class InventoryTransactionRead(ImageRead):
    id: UUID
    item_id: UUID
    site_id: Optional[UUID] = None
    transaction_type: str
    quantity: float
    previous_stock: float
    new_stock: float
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    item: Optional[InventoryItemBrief] = None
    site: Optional[SiteBrief] = None


class InventoryTransactionCreate(BaseModel):
    item_id: UUID
    site_id: UUID
    transaction_type: TransactionType
    quantity: float
    notes: Optional[str] = None
    image_key: Optional[str] = None
    created_by: Optional[UUID] = None

    @field_validator("quantity")
    @classmethod
    def _quantity_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("quantity must be >= 0")
        return v

    @field_validator("notes", "image_key")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class StockSummaryRead(BaseModel):
    item_id: UUID
    item_name: Optional[str] = None
    item_category: Optional[str] = None
    item_unit: Optional[str] = None
    current_stock: float
    last_updated: Optional[datetime] = None
