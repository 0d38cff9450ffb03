from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import (
    get_async_session,
    Activity as ActivityModel,
    Booking as BookingModel,
    InventoryItem as InventoryItemModel,
    MaterialRequest as MaterialRequestModel,
    MessageLog as MessageLogModel,
    Site as SiteModel,
    User as UserModel,
)
from schemas.dashboard import DashboardStats

router = APIRouter()


async def _count(db: AsyncSession, model, *where) -> int:
    stmt = select(func.count()).select_from(model)
    if where:
        stmt = stmt.where(*where)
    res = await db.execute(stmt)
    return int(res.scalar_one() or 0)


@router.get("/", response_model=DashboardStats)
async def dashboard(db: AsyncSession = Depends(get_async_session)):
    return DashboardStats(
        users=await _count(db, UserModel),
        sites=await _count(db, SiteModel),
        active_sites=await _count(db, SiteModel, SiteModel.status == "active"),
        activities=await _count(db, ActivityModel),
        pending_material_requests=await _count(db, MaterialRequestModel, MaterialRequestModel.status == "pending"),
        pending_bookings=await _count(db, BookingModel, BookingModel.status == "pending"),
        inventory_items=await _count(db, InventoryItemModel),
        message_logs=await _count(db, MessageLogModel),
    )
