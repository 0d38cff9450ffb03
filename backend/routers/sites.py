from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, Site as SiteModel
from schemas.common import MessageResponse
from schemas.sites import SiteCreate, SiteRead, SiteUpdate

router = APIRouter()

SEARCH_FIELDS = ("name", "location")


@router.get("", response_model=List[SiteRead])
async def list_sites(
    q: Optional[str] = None,
    site_status: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(SiteModel)
    if site_status:
        stmt = stmt.where(SiteModel.status == site_status)
    res = await db.execute(stmt.order_by(SiteModel.created_at.desc(), SiteModel.id.desc()))
    rows = [SiteRead.model_validate(s) for s in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.get("/{site_id}", response_model=SiteRead)
async def get_site(site_id: UUID, db: AsyncSession = Depends(get_async_session)):
    return SiteRead.model_validate(await get_or_404(db, SiteModel, site_id, "Site"))


@router.post("", response_model=SiteRead, status_code=status.HTTP_201_CREATED)
async def create_site(payload: SiteCreate, db: AsyncSession = Depends(get_async_session)):
    m = SiteModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "sites", "Failed to create site")
    await db.refresh(m)
    return SiteRead.model_validate(m)


@router.patch("/{site_id}", response_model=SiteRead)
async def update_site(site_id: UUID, payload: SiteUpdate, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, SiteModel, site_id, "Site")
    apply_update(m, payload)
    await commit_or_fail(db, "sites", "Failed to update site")
    await db.refresh(m)
    return SiteRead.model_validate(m)


@router.delete("/{site_id}", response_model=MessageResponse)
async def delete_site(site_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, SiteModel, site_id, "Site")
    return await delete_or_fail(db, m, "sites", "Site")
