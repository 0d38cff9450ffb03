from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Activity as ActivityModel
from schemas.activities import ActivityRead, ActivityUpdate
from schemas.common import MessageResponse

router = APIRouter()

SEARCH_FIELDS = ("activity_type", "description", "user.name")
_JOINS = (selectinload(ActivityModel.user), selectinload(ActivityModel.site))


@router.get("", response_model=List[ActivityRead])
async def list_activities(
    q: Optional[str] = None,
    site_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(ActivityModel).options(*_JOINS)
    if site_id:
        stmt = stmt.where(ActivityModel.site_id == site_id)
    if user_id:
        stmt = stmt.where(ActivityModel.user_id == user_id)
    res = await db.execute(stmt.order_by(ActivityModel.created_at.desc(), ActivityModel.id.desc()))
    rows = [ActivityRead.model_validate(a) for a in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.get("/{activity_id}", response_model=ActivityRead)
async def get_activity(activity_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, ActivityModel, activity_id, "Activity", options=_JOINS)
    return ActivityRead.model_validate(m)


@router.patch("/{activity_id}", response_model=ActivityRead)
async def update_activity(activity_id: UUID, payload: ActivityUpdate, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, ActivityModel, activity_id, "Activity")
    apply_update(m, payload)
    await commit_or_fail(db, "activities", "Failed to update activity")
    m = await get_or_404(db, ActivityModel, activity_id, "Activity", options=_JOINS)
    return ActivityRead.model_validate(m)


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(activity_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, ActivityModel, activity_id, "Activity")
    return await delete_or_fail(db, m, "activities", "Activity")
