import logging
import secrets

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from fastapi_users import exceptions as fu_exceptions
from fastapi_users.authentication import Strategy
from sqlalchemy.ext.asyncio import AsyncSession

from core import otp
from core.auth import AdminManager, auth_backend, get_user_manager
from core.config import settings
from db.database import get_async_session
from schemas.auth import OtpRequest, OtpRequestResult, OtpVerify
from schemas.users import AdminCreate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _find_account(user_manager: AdminManager, email: str):
    try:
        return await user_manager.get_by_email(email)
    except fu_exceptions.UserNotExists:
        return None


@router.post("/request", response_model=OtpRequestResult)
async def request_code(
    payload: OtpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_async_session),
    user_manager: AdminManager = Depends(get_user_manager),
):
    """Email a one-time sign-in code."""
    email = otp.normalize_email(payload.email)

    account = await _find_account(user_manager, email)
    if account is None and not settings.otp_allow_signup:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No account for this email")
    if account is not None and not account.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    code = await otp.issue_code(db, email)
    otp.send_code_email(background_tasks, email, code)
    return OtpRequestResult(message="Check your email for the verification code", email=email)


@router.post("/verify")
async def verify_code(
    payload: OtpVerify,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user_manager: AdminManager = Depends(get_user_manager),
    strategy: Strategy = Depends(auth_backend.get_strategy),
):
    """Exchange a valid code for a bearer token."""
    email = otp.normalize_email(payload.email)
    try:
        await otp.consume_code(db, email, payload.code)
    except otp.OtpLocked as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=e.message)
    except otp.OtpError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    account = await _find_account(user_manager, email)
    if account is None:
        if not settings.otp_allow_signup:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No account for this email")
        # Code-only accounts get an unusable random password
        account = await user_manager.create(
            AdminCreate(email=email, password=secrets.token_urlsafe(32)),
            safe=True,
            request=request,
        )
    if not account.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    if not account.is_verified:
        account = await user_manager.user_db.update(account, {"is_verified": True})

    response = await auth_backend.login(strategy, account)
    await user_manager.on_after_login(account, request, response)
    return response
