from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Booking as BookingModel
from schemas.bookings import BookingRead, BookingStatusUpdate
from schemas.common import MessageResponse

router = APIRouter()

SEARCH_FIELDS = ("customer_name", "customer_phone")


@router.get("", response_model=List[BookingRead])
async def list_bookings(
    q: Optional[str] = None,
    booking_status: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(BookingModel)
    if booking_status:
        stmt = stmt.where(BookingModel.status == booking_status)
    res = await db.execute(stmt.order_by(BookingModel.created_at.desc(), BookingModel.id.desc()))
    rows = [BookingRead.model_validate(b) for b in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.patch("/{booking_id}/status", response_model=BookingRead)
async def update_booking_status(
    booking_id: UUID,
    payload: BookingStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, BookingModel, booking_id, "Booking")
    m.status = payload.status
    await commit_or_fail(db, "bookings", "Failed to update booking status")
    await db.refresh(m)
    return BookingRead.model_validate(m)


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(booking_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, BookingModel, booking_id, "Booking")
    return await delete_or_fail(db, m, "bookings", "Booking")
