from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import (
    get_async_session,
    Site as SiteModel,
    User as UserModel,
    UserSiteAssignment as AssignmentModel,
)
from schemas.common import MessageResponse
from schemas.sites import AssignmentCreate, AssignmentRead, AssignmentUpdate

router = APIRouter()

SEARCH_FIELDS = ("user.name", "site.name", "role")
_JOINS = (selectinload(AssignmentModel.user), selectinload(AssignmentModel.site))
_DUPLICATE = "User is already assigned to this site"


async def _ensure_unassigned(db: AsyncSession, user_id: UUID, site_id: UUID, exclude_id: Optional[UUID] = None):
    stmt = select(AssignmentModel.id).where(AssignmentModel.user_id == user_id, AssignmentModel.site_id == site_id)
    if exclude_id:
        stmt = stmt.where(AssignmentModel.id != exclude_id)
    existing = await db.execute(stmt)
    if existing.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE)


@router.get("", response_model=List[AssignmentRead])
async def list_assignments(
    q: Optional[str] = None,
    site_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(AssignmentModel).options(*_JOINS)
    if site_id:
        stmt = stmt.where(AssignmentModel.site_id == site_id)
    if user_id:
        stmt = stmt.where(AssignmentModel.user_id == user_id)
    res = await db.execute(stmt.order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc()))
    rows = [AssignmentRead.model_validate(a) for a in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.post("", response_model=AssignmentRead, status_code=status.HTTP_201_CREATED)
async def create_assignment(payload: AssignmentCreate, db: AsyncSession = Depends(get_async_session)):
    await get_or_404(db, UserModel, payload.user_id, "User")
    await get_or_404(db, SiteModel, payload.site_id, "Site")
    await _ensure_unassigned(db, payload.user_id, payload.site_id)

    m = AssignmentModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "user-site-assignments", "Failed to create assignment", conflict=_DUPLICATE)
    m = await get_or_404(db, AssignmentModel, m.id, "Assignment", options=_JOINS)
    return AssignmentRead.model_validate(m)


@router.patch("/{assignment_id}", response_model=AssignmentRead)
async def update_assignment(
    assignment_id: UUID,
    payload: AssignmentUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, AssignmentModel, assignment_id, "Assignment")
    data = payload.model_dump(exclude_unset=True)
    if "user_id" in data or "site_id" in data:
        user_id = data.get("user_id") or m.user_id
        site_id = data.get("site_id") or m.site_id
        await _ensure_unassigned(db, user_id, site_id, exclude_id=m.id)

    apply_update(m, payload)
    await commit_or_fail(db, "user-site-assignments", "Failed to update assignment", conflict=_DUPLICATE)
    m = await get_or_404(db, AssignmentModel, assignment_id, "Assignment", options=_JOINS)
    return AssignmentRead.model_validate(m)


@router.delete("/{assignment_id}", response_model=MessageResponse)
async def delete_assignment(assignment_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, AssignmentModel, assignment_id, "Assignment")
    return await delete_or_fail(db, m, "user-site-assignments", "Assignment")
