from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from schemas.common import ORMModel, strip_optional, strip_required


class VendorRead(ORMModel):
    id: UUID
    name: str
    contact_person: str
    phone: str
    address: str
    gst_number: str
    material_groups: List[str] = []
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VendorCreate(BaseModel):
    name: str
    contact_person: str
    phone: str
    address: str
    gst_number: str
    material_groups: List[str] = []
    is_active: bool = True

    @field_validator("name", "contact_person", "phone", "address", "gst_number")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("gst_number")
    @classmethod
    def _gst_upper(cls, v: str) -> str:
        return v.upper()


class VendorUpdate(BaseModel):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gst_number: Optional[str] = None
    material_groups: Optional[List[str]] = None
    is_active: Optional[bool] = None


class MaterialRead(ORMModel):
    id: UUID
    code: str
    name: str
    unit: str
    material_group: str
    terms: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None


class MaterialCreate(BaseModel):
    code: str
    name: str
    unit: str
    material_group: str
    terms: Optional[str] = None
    is_active: bool = True

    @field_validator("code", "name", "unit", "material_group")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)


class MaterialUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    unit: Optional[str] = None
    material_group: Optional[str] = None
    terms: Optional[str] = None
    is_active: Optional[bool] = None


class AuthorizedPersonRead(ORMModel):
    id: UUID
    name: str
    phone: str
    position: str
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None


class AuthorizedPersonCreate(BaseModel):
    name: str
    phone: str
    position: str
    is_active: bool = True

    @field_validator("name", "phone", "position")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)


class AuthorizedPersonUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    is_active: Optional[bool] = None


class VendorBrief(ORMModel):
    id: UUID
    name: str


class MaterialBrief(ORMModel):
    id: UUID
    code: str
    name: str
    unit: str


class PurchaseOrderItemRead(ORMModel):
    id: UUID
    material_id: UUID
    item_order: int
    quantity: float
    rate: float
    total: float
    material: Optional[MaterialBrief] = None


class PurchaseOrderItemCreate(BaseModel):
    material_id: UUID
    quantity: float
    rate: float

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @field_validator("rate")
    @classmethod
    def _rate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("rate must be >= 0")
        return v


class PurchaseOrderRead(ORMModel):
    id: UUID
    po_number: str
    po_date: date
    vendor_id: UUID
    created_by: UUID
    status: Optional[str] = None
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None
    material_terms: Optional[str] = None
    contact_person_id: Optional[UUID] = None
    ordered_by_id: Optional[UUID] = None
    confirmed_by_id: Optional[UUID] = None
    total_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    vendor: Optional[VendorBrief] = None
    items: List[PurchaseOrderItemRead] = []


class PurchaseOrderCreate(BaseModel):
    po_number: str
    po_date: date
    vendor_id: UUID
    created_by: UUID
    delivery_date: Optional[date] = None
    delivery_time: Optional[str] = None
    material_terms: Optional[str] = None
    contact_person_id: Optional[UUID] = None
    ordered_by_id: Optional[UUID] = None
    confirmed_by_id: Optional[UUID] = None
    items: List[PurchaseOrderItemCreate]

    @field_validator("po_number")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("delivery_time", "material_terms")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)

    @field_validator("items")
    @classmethod
    def _at_least_one_item(cls, v: List[PurchaseOrderItemCreate]) -> List[PurchaseOrderItemCreate]:
        if not v:
            raise ValueError("a purchase order needs at least one item")
        return v


PurchaseOrderStatus = Literal["draft", "sent", "confirmed", "delivered", "cancelled"]


class PurchaseOrderStatusUpdate(BaseModel):
    status: PurchaseOrderStatus
