"""
Email one-time codes for dashboard sign-in.

Only an HMAC of the code is stored; a new request replaces the previous code
for the same address.
"""

import hashlib
import hmac
import logging
import secrets
import smtplib
from datetime import datetime, timedelta, timezone
from email.message import EmailMessage
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from db.database import EmailOtp

logger = logging.getLogger(__name__)


class OtpError(Exception):
    message = "Invalid verification code"


class OtpInvalid(OtpError):
    pass


class OtpExpired(OtpError):
    message = "Verification code expired"


class OtpLocked(OtpError):
    message = "Too many attempts, request a new code"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def generate_code(length: Optional[int] = None) -> str:
    n = length or settings.otp_length
    return "".join(str(secrets.randbelow(10)) for _ in range(n))


def hash_code(email: str, code: str) -> str:
    msg = f"{normalize_email(email)}:{(code or '').strip()}".encode("utf-8")
    return hmac.new(settings.secret.encode("utf-8"), msg, hashlib.sha256).hexdigest()


def _aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


async def issue_code(db: AsyncSession, email: str) -> str:
    email = normalize_email(email)
    code = generate_code()
    await db.execute(delete(EmailOtp).where(EmailOtp.email == email))
    db.add(
        EmailOtp(
            email=email,
            code_hash=hash_code(email, code),
            attempts=0,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=settings.otp_ttl_seconds),
        )
    )
    await db.commit()
    logger.info("Issued sign-in code for %s", email)
    return code


async def consume_code(db: AsyncSession, email: str, code: str) -> None:
    """Accept `code` for `email` and delete it, or raise an OtpError."""
    email = normalize_email(email)
    res = await db.execute(select(EmailOtp).where(EmailOtp.email == email))
    row = res.scalar_one_or_none()
    if not row:
        raise OtpInvalid()

    if _aware(row.expires_at) <= datetime.now(timezone.utc):
        await db.delete(row)
        await db.commit()
        raise OtpExpired()

    if int(row.attempts or 0) >= settings.otp_max_attempts:
        raise OtpLocked()

    if not hmac.compare_digest(row.code_hash, hash_code(email, code)):
        row.attempts = int(row.attempts or 0) + 1
        await db.commit()
        logger.info("Wrong sign-in code for %s (attempt %s)", email, row.attempts)
        raise OtpInvalid()

    await db.delete(row)
    await db.commit()


def smtp_configured() -> bool:
    return bool(settings.smtp_host and settings.smtp_from)


def send_code_email(background_tasks: BackgroundTasks, to_email: str, code: str) -> None:
    """Queue the code email; without SMTP settings the code only reaches the debug log."""
    if not smtp_configured():
        logger.warning("SMTP not configured; sign-in code for %s not emailed", to_email)
        logger.debug("Sign-in code for %s: %s", to_email, code)
        return

    minutes = max(1, settings.otp_ttl_seconds // 60)

    def _send() -> None:
        msg = EmailMessage()
        msg["From"] = settings.smtp_from
        msg["To"] = to_email
        msg["Subject"] = "Your SiteOps verification code"
        msg.set_content(f"Your verification code is {code}. It expires in {minutes} minutes.")

        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as s:
                s.starttls()
                if settings.smtp_user and settings.smtp_pass:
                    s.login(settings.smtp_user, settings.smtp_pass)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to email sign-in code to %s", to_email)

    background_tasks.add_task(_send)
