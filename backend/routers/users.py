from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import apply_update, commit_or_fail, delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, User as UserModel
from schemas.common import MessageResponse
from schemas.users import UserCreate, UserRead, UserUpdate

router = APIRouter()

SEARCH_FIELDS = ("name", "phone", "email", "role")


@router.get("", response_model=List[UserRead])
async def list_users(
    q: Optional[str] = None,
    role: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(UserModel)
    if role:
        stmt = stmt.where(UserModel.role == role)
    res = await db.execute(stmt.order_by(UserModel.created_at.desc(), UserModel.id.desc()))
    rows = [UserRead.model_validate(u) for u in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_async_session)):
    return UserRead.model_validate(await get_or_404(db, UserModel, user_id, "User"))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_async_session)):
    m = UserModel(**payload.model_dump())
    db.add(m)
    await commit_or_fail(db, "users", "Failed to create user", conflict="A user with this phone already exists")
    await db.refresh(m)
    return UserRead.model_validate(m)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(user_id: UUID, payload: UserUpdate, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, UserModel, user_id, "User")
    apply_update(m, payload)
    await commit_or_fail(db, "users", "Failed to update user", conflict="A user with this phone already exists")
    await db.refresh(m)
    return UserRead.model_validate(m)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, UserModel, user_id, "User")
    return await delete_or_fail(db, m, "users", "User")
