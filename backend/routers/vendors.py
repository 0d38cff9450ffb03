from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Vendor as VendorModel
from schemas.common import MessageResponse
from schemas.purchasing import VendorCreate, VendorRead, VendorUpdate

router = APIRouter()

SEARCH_FIELDS = ("name", "contact_person", "phone", "gst_number")


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(VendorModel.id).where(func.lower(VendorModel.name) == name.lower())
    if exclude_id:
        stmt = stmt.where(VendorModel.id != exclude_id)
    existing = await db.execute(stmt)
    if existing.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Vendor already exists")


@router.get("", response_model=List[VendorRead])
async def list_vendors(
    q: Optional[str] = None,
    active_only: bool = False,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(VendorModel)
    if active_only:
        stmt = stmt.where(VendorModel.is_active.is_(True))
    res = await db.execute(stmt.order_by(VendorModel.created_at.desc(), VendorModel.id.desc()))
    rows = [VendorRead.model_validate(v) for v in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.post("", response_model=VendorRead, status_code=status.HTTP_201_CREATED)
async def create_vendor(payload: VendorCreate, db: AsyncSession = Depends(get_async_session)):
    await _ensure_unique_name(db, payload.name)
    m = VendorModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "vendors", "Failed to create vendor")
    await db.refresh(m)
    return VendorRead.model_validate(m)


@router.patch("/{vendor_id}", response_model=VendorRead)
async def update_vendor(vendor_id: UUID, payload: VendorUpdate, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, VendorModel, vendor_id, "Vendor")

    data = payload.model_dump(exclude_unset=True)
    if data.get("name") is not None:
        name = data["name"].strip()
        if not name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name is required")
        await _ensure_unique_name(db, name, exclude_id=m.id)
        payload.name = name
    if data.get("gst_number") is not None:
        payload.gst_number = data["gst_number"].strip().upper()

    apply_update(m, payload)
    await commit_or_fail(db, "vendors", "Failed to update vendor")
    await db.refresh(m)
    return VendorRead.model_validate(m)


@router.delete("/{vendor_id}", response_model=MessageResponse)
async def delete_vendor(vendor_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, VendorModel, vendor_id, "Vendor")
    return await delete_or_fail(db, m, "vendors", "Vendor")
