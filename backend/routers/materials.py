from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Material as MaterialModel
from schemas.common import MessageResponse
from schemas.purchasing import MaterialCreate, MaterialRead, MaterialUpdate

router = APIRouter()

SEARCH_FIELDS = ("code", "name", "material_group")


async def _ensure_unique_code(db: AsyncSession, code: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(MaterialModel.id).where(MaterialModel.code == code)
    if exclude_id:
        stmt = stmt.where(MaterialModel.id != exclude_id)
    existing = await db.execute(stmt)
    if existing.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Material code already exists")


@router.get("", response_model=List[MaterialRead])
async def list_materials(
    q: Optional[str] = None,
    material_group: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(MaterialModel)
    if material_group:
        stmt = stmt.where(MaterialModel.material_group == material_group)
    res = await db.execute(stmt.order_by(MaterialModel.created_at.desc(), MaterialModel.id.desc()))
    rows = [MaterialRead.model_validate(m) for m in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.post("", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
async def create_material(payload: MaterialCreate, db: AsyncSession = Depends(get_async_session)):
    await _ensure_unique_code(db, payload.code)
    m = MaterialModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "materials", "Failed to create material")
    await db.refresh(m)
    return MaterialRead.model_validate(m)


@router.patch("/{material_id}", response_model=MaterialRead)
async def update_material(material_id: UUID, payload: MaterialUpdate, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, MaterialModel, material_id, "Material")
    if payload.code is not None and payload.code != m.code:
        await _ensure_unique_code(db, payload.code, exclude_id=m.id)
    apply_update(m, payload)
    await commit_or_fail(db, "materials", "Failed to update material")
    await db.refresh(m)
    return MaterialRead.model_validate(m)


@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(material_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, MaterialModel, material_id, "Material")
    return await delete_or_fail(db, m, "materials", "Material")
