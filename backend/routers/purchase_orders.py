import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import (
    get_async_session,
    Material as MaterialModel,
    PurchaseOrder as PurchaseOrderModel,
    PurchaseOrderItem as PurchaseOrderItemModel,
    User as UserModel,
    Vendor as VendorModel,
)
from schemas.common import MessageResponse
from schemas.purchasing import PurchaseOrderCreate, PurchaseOrderRead, PurchaseOrderStatusUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_FIELDS = ("po_number", "vendor.name", "status")
_JOINS = (
    selectinload(PurchaseOrderModel.vendor),
    selectinload(PurchaseOrderModel.items).selectinload(PurchaseOrderItemModel.material),
)
_DUPLICATE = "Purchase order number already exists"


def _line_total(quantity: float, rate: float) -> float:
    return round(float(quantity) * float(rate), 2)


@router.get("", response_model=List[PurchaseOrderRead])
async def list_purchase_orders(
    q: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    vendor_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(PurchaseOrderModel).options(*_JOINS)
    if status_filter:
        stmt = stmt.where(PurchaseOrderModel.status == status_filter)
    if vendor_id:
        stmt = stmt.where(PurchaseOrderModel.vendor_id == vendor_id)
    res = await db.execute(stmt.order_by(PurchaseOrderModel.created_at.desc(), PurchaseOrderModel.id.desc()))
    rows = [PurchaseOrderRead.model_validate(o) for o in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.get("/{order_id}", response_model=PurchaseOrderRead)
async def get_purchase_order(order_id: UUID, db: AsyncSession = Depends(get_async_session)):
    o = await get_or_404(db, PurchaseOrderModel, order_id, "Purchase order", options=_JOINS)
    return PurchaseOrderRead.model_validate(o)


@router.post("", response_model=PurchaseOrderRead, status_code=status.HTTP_201_CREATED)
async def create_purchase_order(payload: PurchaseOrderCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Create an order together with its line items in a single commit.

    Each line's total is quantity * rate; the order total is the sum of the lines.
    """
    await get_or_404(db, VendorModel, payload.vendor_id, "Vendor")
    await get_or_404(db, UserModel, payload.created_by, "User")

    existing = await db.execute(select(PurchaseOrderModel.id).where(PurchaseOrderModel.po_number == payload.po_number))
    if existing.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE)

    material_ids = {it.material_id for it in payload.items}
    found = await db.execute(select(MaterialModel.id).where(MaterialModel.id.in_(material_ids)))
    missing = material_ids - set(found.scalars().all())
    if missing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")

    items: List[PurchaseOrderItemModel] = []
    for idx, it in enumerate(payload.items, start=1):
        items.append(
            PurchaseOrderItemModel(
                material_id=it.material_id,
                item_order=idx,
                quantity=float(it.quantity),
                rate=float(it.rate),
                total=_line_total(it.quantity, it.rate),
            )
        )

    o = PurchaseOrderModel(
        **payload.model_dump(exclude={"items"}),
        total_amount=round(sum(i.total for i in items), 2),
        items=items,
    )
    db.add(o)
    await commit_or_fail(db, "purchase-orders", "Failed to create purchase order", conflict=_DUPLICATE)
    logger.info("[purchase-orders] created %s with %s items, total %.2f", o.po_number, len(items), o.total_amount)

    o = await get_or_404(db, PurchaseOrderModel, o.id, "Purchase order", options=_JOINS)
    return PurchaseOrderRead.model_validate(o)


@router.patch("/{order_id}/status", response_model=PurchaseOrderRead)
async def update_purchase_order_status(
    order_id: UUID,
    payload: PurchaseOrderStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    o = await get_or_404(db, PurchaseOrderModel, order_id, "Purchase order")
    o.status = payload.status
    await commit_or_fail(db, "purchase-orders", "Failed to update purchase order status")
    o = await get_or_404(db, PurchaseOrderModel, order_id, "Purchase order", options=_JOINS)
    return PurchaseOrderRead.model_validate(o)


@router.delete("/{order_id}", response_model=MessageResponse)
async def delete_purchase_order(order_id: UUID, db: AsyncSession = Depends(get_async_session)):
    # Line items go with the order
    o = await get_or_404(db, PurchaseOrderModel, order_id, "Purchase order", options=_JOINS)
    return await delete_or_fail(db, o, "purchase-orders", "Purchase order")
