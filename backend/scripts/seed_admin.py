import argparse
import asyncio
import sys
from pathlib import Path

"""
Create (or re-activate) a dashboard administrator account.

Administrators sign in with emailed one-time codes; the password set here is
only used by the fastapi-users JWT login route.

This script can be run from either:
- backend/: `python scripts/seed_admin.py admin@example.com`
- repo root: `python backend/scripts/seed_admin.py admin@example.com`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import secrets

from fastapi_users.password import PasswordHelper
from sqlalchemy import func, select

from db.database import async_session_maker, create_db_and_tables, AdminAccount


password_helper = PasswordHelper()


async def seed(email: str, password: str, superuser: bool) -> None:
    email = email.strip().lower()
    await create_db_and_tables()

    async with async_session_maker() as session:
        async with session.begin():
            result = await session.execute(select(AdminAccount).where(func.lower(AdminAccount.email) == email))
            account = result.scalar_one_or_none()
            if account:
                account.is_active = True
                account.is_superuser = account.is_superuser or superuser
                print(f"[seed_admin] re-activated {email}")
                return

            session.add(
                AdminAccount(
                    email=email,
                    hashed_password=password_helper.hash(password),
                    is_active=True,
                    is_superuser=superuser,
                    is_verified=True,
                )
            )
            print(f"[seed_admin] created {email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("email", help="Administrator email address")
    parser.add_argument("--password", default=None, help="Password for /auth/jwt/login (random when omitted)")
    parser.add_argument("--superuser", action="store_true", help="Also grant access to the /accounts admin routes")
    args = parser.parse_args()

    asyncio.run(seed(args.email, args.password or secrets.token_urlsafe(24), bool(args.superuser)))
