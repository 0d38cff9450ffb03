from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, ConversationSession as SessionModel
from schemas.common import MessageResponse
from schemas.messaging import ConversationSessionRead

router = APIRouter()

SEARCH_FIELDS = ("phone", "intent", "step")


@router.get("", response_model=List[ConversationSessionRead])
async def list_sessions(q: Optional[str] = None, db: AsyncSession = Depends(get_async_session)):
    # Sessions have no created_at; the most recently touched conversation comes first
    res = await db.execute(select(SessionModel).order_by(SessionModel.updated_at.desc(), SessionModel.phone.desc()))
    rows = [ConversationSessionRead.model_validate(s) for s in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.delete("/{phone}", response_model=MessageResponse)
async def delete_session(phone: str, db: AsyncSession = Depends(get_async_session)):
    """Reset the bot conversation with `phone`."""
    m = await get_or_404(db, SessionModel, phone, "Session", pk="phone")
    return await delete_or_fail(db, m, "sessions", "Session")
