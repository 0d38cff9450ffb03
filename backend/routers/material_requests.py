from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, MaterialRequest as MaterialRequestModel
from schemas.common import MessageResponse
from schemas.material_requests import MaterialRequestRead, MaterialRequestStatusUpdate, MaterialRequestUpdate

router = APIRouter()

SEARCH_FIELDS = ("material_name", "user.name", "site.name")
_JOINS = (selectinload(MaterialRequestModel.user), selectinload(MaterialRequestModel.site))


@router.get("", response_model=List[MaterialRequestRead])
async def list_material_requests(
    q: Optional[str] = None,
    request_status: Optional[str] = None,
    site_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(MaterialRequestModel).options(*_JOINS)
    if request_status:
        stmt = stmt.where(MaterialRequestModel.status == request_status)
    if site_id:
        stmt = stmt.where(MaterialRequestModel.site_id == site_id)
    res = await db.execute(stmt.order_by(MaterialRequestModel.created_at.desc(), MaterialRequestModel.id.desc()))
    rows = [MaterialRequestRead.model_validate(r) for r in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.get("/{request_id}", response_model=MaterialRequestRead)
async def get_material_request(request_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request", options=_JOINS)
    return MaterialRequestRead.model_validate(m)


@router.patch("/{request_id}/status", response_model=MaterialRequestRead)
async def update_material_request_status(
    request_id: UUID,
    payload: MaterialRequestStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request")
    m.status = payload.status
    await commit_or_fail(db, "material-requests", "Failed to update material request status")
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request", options=_JOINS)
    return MaterialRequestRead.model_validate(m)


@router.patch("/{request_id}", response_model=MaterialRequestRead)
async def update_material_request(
    request_id: UUID,
    payload: MaterialRequestUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request")
    apply_update(m, payload)
    await commit_or_fail(db, "material-requests", "Failed to update material request")
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request", options=_JOINS)
    return MaterialRequestRead.model_validate(m)


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_material_request(request_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, MaterialRequestModel, request_id, "Material request")
    return await delete_or_fail(db, m, "material-requests", "Material request")
