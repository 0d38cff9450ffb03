from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.crud import delete_or_fail, get_or_404
from core.search import filter_rows
from db.database import get_async_session, EmployeeOtp as EmployeeOtpModel
from schemas.common import MessageResponse
from schemas.messaging import EmployeeOtpRead

router = APIRouter()

SEARCH_FIELDS = ("phone",)


def _to_read(m: EmployeeOtpModel, now: datetime) -> EmployeeOtpRead:
    expires_at = m.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return EmployeeOtpRead(
        phone=m.phone,
        attempts=m.attempts,
        expires_at=expires_at,
        created_at=m.created_at,
        is_expired=expires_at <= now,
    )


@router.get("", response_model=List[EmployeeOtpRead])
async def list_employee_otps(q: Optional[str] = None, db: AsyncSession = Depends(get_async_session)):
    res = await db.execute(
        select(EmployeeOtpModel).order_by(EmployeeOtpModel.created_at.desc(), EmployeeOtpModel.phone.desc())
    )
    now = datetime.now(timezone.utc)
    rows = [_to_read(m, now) for m in res.scalars().all()]
    return filter_rows(rows, q, SEARCH_FIELDS)


@router.delete("/{phone}", response_model=MessageResponse)
async def delete_employee_otp(phone: str, db: AsyncSession = Depends(get_async_session)):
    m = await get_or_404(db, EmployeeOtpModel, phone, "Employee OTP", pk="phone")
    return await delete_or_fail(db, m, "employee-otps", "Employee OTP")
