from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Invoice as InvoiceModel
from schemas.common import MessageResponse
from schemas.invoices import InvoiceRead, InvoiceStatusUpdate

router = APIRouter()

SEARCH_FIELDS = ("company_name", "invoice_description", "status")
_JOINS = (selectinload(InvoiceModel.site), selectinload(InvoiceModel.user))


@router.get("", response_model=List[InvoiceRead])
async def list_invoices(
    q: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    site_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(InvoiceModel).options(*_JOINS)
    if status_filter:
        stmt = stmt.where(InvoiceModel.status == status_filter)
    if site_id:
        stmt = stmt.where(InvoiceModel.site_id == site_id)
    res = await db.execute(stmt.order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc()))
    rows = [InvoiceRead.model_validate(i) for i in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.patch("/{invoice_id}/status", response_model=InvoiceRead)
async def update_invoice_status(
    invoice_id: UUID,
    payload: InvoiceStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, InvoiceModel, invoice_id, "Invoice")
    m.status = payload.status
    await commit_or_fail(db, "invoices", "Failed to update invoice status")
    m = await get_or_404(db, InvoiceModel, invoice_id, "Invoice", options=_JOINS)
    return InvoiceRead.model_validate(m)


@router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(invoice_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, InvoiceModel, invoice_id, "Invoice")
    return await delete_or_fail(db, m, "invoices", "Invoice")
