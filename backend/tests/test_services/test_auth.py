from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.auth import (
    get_app_role,
    hash_password,
    is_allowed_email,
    login_agent,
    logout_agent,
    verify_password,
)
from app.models.agent import Agent, AgentRole, Team
from app.models.session import Session


async def _create_agent(db_session: AsyncSession, email: str = "auth@example.com") -> Agent:
    agent = Agent(
        first_name="Auth",
        last_name="Agent",
        email=email,
        team=Team.US,
        password_hash=hash_password("SecurePass123!"),
    )
    db_session.add(agent)
    await db_session.commit()
    await db_session.refresh(agent)
    return agent


@pytest.mark.asyncio
async def test_hash_and_verify_password():
    """bcrypt hash and verify round-trip."""
    pw = "SecurePass123!"
    hashed = hash_password(pw)
    assert hashed != pw
    assert verify_password(pw, hashed) is True
    assert verify_password("WrongPass", hashed) is False


def test_get_app_role_normalizes():
    assert get_app_role(" SuperAdmin ") == AgentRole.superadmin
    assert get_app_role("admin") == AgentRole.admin
    assert get_app_role(AgentRole.admin) == AgentRole.admin
    assert get_app_role("viewer") == AgentRole.user
    assert get_app_role(None) == AgentRole.user


def test_is_allowed_email(monkeypatch):
    assert is_allowed_email("a@anywhere.com")
    assert not is_allowed_email("no-at-sign")
    assert not is_allowed_email(None)

    monkeypatch.setattr(settings, "allowed_email_domains", "vesta.com, Partner.org")
    assert is_allowed_email("a@VESTA.com")
    assert is_allowed_email("b@partner.org")
    assert not is_allowed_email("c@gmail.com")


@pytest.mark.asyncio
async def test_login_agent_success(db_session: AsyncSession):
    """Login with valid credentials returns agent + token and a 24h session."""
    await _create_agent(db_session)

    agent, token = await login_agent(
        db_session, email="AUTH@example.com", password="SecurePass123!"
    )
    await db_session.commit()

    assert agent.email == "auth@example.com"
    assert isinstance(token, str)
    assert len(token) == 64

    session = (
        await db_session.execute(select(Session).where(Session.token == token))
    ).scalar_one()
    expires_at = session.expires_at.replace(tzinfo=timezone.utc)
    remaining = expires_at - datetime.now(timezone.utc)
    assert timedelta(hours=23) < remaining <= timedelta(hours=24)


@pytest.mark.asyncio
async def test_login_agent_wrong_password(db_session: AsyncSession):
    await _create_agent(db_session)

    with pytest.raises(HTTPException) as exc_info:
        await login_agent(db_session, email="auth@example.com", password="nope")
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_unknown_agent(db_session: AsyncSession):
    with pytest.raises(HTTPException) as exc_info:
        await login_agent(db_session, email="ghost@example.com", password="SecurePass123!")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_session(db_session: AsyncSession):
    await _create_agent(db_session)
    _, token = await login_agent(db_session, email="auth@example.com", password="SecurePass123!")

    await logout_agent(db_session, token=token)
    await db_session.commit()

    session = (
        await db_session.execute(select(Session).where(Session.token == token))
    ).scalar_one()
    assert session.revoked is True


@pytest.mark.asyncio
async def test_logout_unknown_token_is_noop(db_session: AsyncSession):
    await logout_agent(db_session, token="does-not-exist")
