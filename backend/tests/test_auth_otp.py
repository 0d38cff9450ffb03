from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from core import otp
from core.config import settings
from db.database import AdminAccount, EmailOtp

EMAIL = "ops@example.com"


@pytest.fixture()
def fixed_code(monkeypatch):
    monkeypatch.setattr(otp, "generate_code", lambda length=None: "123456")
    return "123456"


@pytest.fixture()
async def account(db_session):
    acc = AdminAccount(email=EMAIL, hashed_password="not-used", is_active=True, is_verified=False)
    db_session.add(acc)
    await db_session.commit()
    return acc


async def test_empty_email_is_rejected_before_any_store_access(anon_client, db_session):
    resp = await anon_client.post("/auth/otp/request", json={"email": ""})
    assert resp.status_code == 422

    rows = await db_session.execute(select(EmailOtp))
    assert rows.scalars().all() == []


async def test_unknown_email_without_signup_is_refused(anon_client):
    resp = await anon_client.post("/auth/otp/request", json={"email": "nobody@example.com"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No account for this email"


async def test_request_stores_only_a_hash(anon_client, account, fixed_code, session_maker):
    resp = await anon_client.post("/auth/otp/request", json={"email": EMAIL.upper()})
    assert resp.status_code == 200
    assert resp.json()["email"] == EMAIL

    async with session_maker() as s:
        row = (await s.execute(select(EmailOtp).where(EmailOtp.email == EMAIL))).scalar_one()
    assert row.code_hash != fixed_code
    assert row.code_hash == otp.hash_code(EMAIL, fixed_code)
    assert row.attempts == 0


async def test_wrong_code_leaves_caller_signed_out(anon_client, account, fixed_code, session_maker):
    await anon_client.post("/auth/otp/request", json={"email": EMAIL})

    resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": "000000"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid verification code"
    assert "access_token" not in resp.json()

    async with session_maker() as s:
        row = (await s.execute(select(EmailOtp).where(EmailOtp.email == EMAIL))).scalar_one()
    assert row.attempts == 1

    assert (await anon_client.get("/users")).status_code == 401


async def test_blank_code_is_a_validation_error(anon_client):
    resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": "  "})
    assert resp.status_code == 422


async def test_valid_code_returns_a_bearer_token(anon_client, account, fixed_code, session_maker):
    await anon_client.post("/auth/otp/request", json={"email": EMAIL})

    resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": fixed_code})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    pages = await anon_client.get("/users", headers=headers)
    assert pages.status_code == 200
    assert pages.json() == []

    async with session_maker() as s:
        assert (await s.execute(select(EmailOtp))).scalars().all() == []
        acc = (await s.execute(select(AdminAccount).where(AdminAccount.email == EMAIL))).scalar_one()
    assert acc.is_verified is True

    # The code is single use
    again = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": fixed_code})
    assert again.status_code == 400


async def test_expired_code_is_refused_and_removed(anon_client, account, fixed_code, session_maker):
    await anon_client.post("/auth/otp/request", json={"email": EMAIL})
    async with session_maker() as s:
        row = (await s.execute(select(EmailOtp).where(EmailOtp.email == EMAIL))).scalar_one()
        row.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        await s.commit()

    resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": fixed_code})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Verification code expired"

    async with session_maker() as s:
        assert (await s.execute(select(EmailOtp))).scalars().all() == []


async def test_too_many_attempts_locks_the_code(anon_client, account, fixed_code):
    await anon_client.post("/auth/otp/request", json={"email": EMAIL})
    for _ in range(settings.otp_max_attempts):
        resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": "999999"})
        assert resp.status_code == 400

    resp = await anon_client.post("/auth/otp/verify", json={"email": EMAIL, "code": fixed_code})
    assert resp.status_code == 429


async def test_signup_creates_an_account_when_enabled(anon_client, fixed_code, monkeypatch, session_maker):
    monkeypatch.setattr(settings, "otp_allow_signup", True)
    new_email = "new.admin@example.com"

    assert (await anon_client.post("/auth/otp/request", json={"email": new_email})).status_code == 200
    resp = await anon_client.post("/auth/otp/verify", json={"email": new_email, "code": fixed_code})
    assert resp.status_code == 200

    async with session_maker() as s:
        acc = (await s.execute(select(AdminAccount).where(AdminAccount.email == new_email))).scalar_one()
    assert acc.is_active is True
    assert acc.is_superuser is False


def test_hash_is_bound_to_the_address():
    assert otp.hash_code("a@example.com", "123456") != otp.hash_code("b@example.com", "123456")
    assert otp.hash_code(" A@Example.com ", "123456") == otp.hash_code("a@example.com", "123456")
