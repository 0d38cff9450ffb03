from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, MessageLog as MessageLogModel
from schemas.common import MessageResponse
from schemas.messaging import MessageLogRead

router = APIRouter()

SEARCH_FIELDS = ("phone", "content", "message_type")


@router.get("", response_model=List[MessageLogRead])
async def list_message_logs(
    q: Optional[str] = None,
    direction: Optional[str] = None,
    phone: Optional[str] = None,
    db: AsyncSession = Depends(get_async_session),
):
    stmt = select(MessageLogModel)
    if direction:
        stmt = stmt.where(MessageLogModel.direction == direction)
    if phone:
        stmt = stmt.where(MessageLogModel.phone == phone.strip())
    res = await db.execute(stmt.order_by(MessageLogModel.created_at.desc(), MessageLogModel.id.desc()))
    rows = [MessageLogRead.model_validate(m) for m in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.delete("/{log_id}", response_model=MessageResponse)
async def delete_message_log(log_id: UUID, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, MessageLogModel, log_id, "Message log")
    return await delete_or_fail(db, m, "message-logs", "Message log")
