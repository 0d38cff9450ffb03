from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, AuthorizedPerson as AuthorizedPersonModel
from schemas.common import MessageResponse
from schemas.purchasing import AuthorizedPersonCreate, AuthorizedPersonRead, AuthorizedPersonUpdate

router = APIRouter()

SEARCH_FIELDS = ("name", "phone", "position")


@router.get("", response_model=List[AuthorizedPersonRead])
async def list_authorized_persons(q: Optional[str] = None, db: AsyncSession = Depends(get_async_session)):
    res = await db.execute(
        select(AuthorizedPersonModel).order_by(AuthorizedPersonModel.created_at.desc(), AuthorizedPersonModel.id.desc())
    )
    rows = [AuthorizedPersonRead.model_validate(p) for p in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.post("", response_model=AuthorizedPersonRead, status_code=status.HTTP_201_CREATED)
async def create_authorized_person(payload: AuthorizedPersonCreate, db: AsyncSession = Depends(get_async_session)):
    m = AuthorizedPersonModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "authorized-persons", "Failed to create authorized person")
    await db.refresh(m)
    return AuthorizedPersonRead.model_validate(m)


@router.patch("/{person_id}", response_model=AuthorizedPersonRead)
async def update_authorized_person(
    person_id: UUID,
    payload: AuthorizedPersonUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    m = await get_or_404(db, AuthorizedPersonModel, person_id, "Authorized person")
    apply_update(m, payload)
    await commit_or_fail(db, "authorized-persons", "Failed to update authorized person")
    await db.refresh(m)
    return AuthorizedPersonRead.model_validate(m)


@router.delete("/{person_id}", response_model=MessageResponse)
async def delete_authorized_person(person_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, AuthorizedPersonModel, person_id, "Authorized person")
    return await delete_or_fail(db, m, "authorized-persons", "Authorized person")
