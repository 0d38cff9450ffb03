from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, CustomerInquiry as InquiryModel
from schemas.common import MessageResponse
from schemas.inquiries import CustomerInquiryRead, CustomerInquiryStatusUpdate

router = APIRouter()

SEARCH_FIELDS = ("full_name", "phone", "email", "status")


@router.get("", response_model=List[CustomerInquiryRead])
async def list_customer_inquiries(
    q: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(InquiryModel)
    if status_filter:
        stmt = stmt.where(InquiryModel.status == status_filter)
    res = await db.execute(stmt.order_by(InquiryModel.created_at.desc(), InquiryModel.id.desc()))
    rows = [CustomerInquiryRead.model_validate(i) for i in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.patch("/{inquiry_id}/status", response_model=CustomerInquiryRead)
async def update_customer_inquiry_status(
    inquiry_id: UUID,
    payload: CustomerInquiryStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, InquiryModel, inquiry_id, "Customer inquiry")
    m.status = payload.status
    await commit_or_fail(db, "customer-inquiries", "Failed to update inquiry status")
    await db.refresh(m)
    return CustomerInquiryRead.model_validate(m)


@router.delete("/{inquiry_id}", response_model=MessageResponse)
async def delete_customer_inquiry(inquiry_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, InquiryModel, inquiry_id, "Customer inquiry")
    return await delete_or_fail(db, m, "customer-inquiries", "Customer inquiry")
