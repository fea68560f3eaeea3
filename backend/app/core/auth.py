"""Authentication: agent login, logout, current agent and role gates.

Session-token auth with bcrypt password hashing. Only agents can sign in,
and only from the configured email domains.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.dependencies import get_db
from app.models.agent import Agent, AgentRole
from app.models.session import Session

logger = logging.getLogger("credtrack.auth")

SESSION_TOKEN_HEADER = "X-Session-Token"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _generate_token() -> str:
    """Generate a cryptographically secure session token."""
    return secrets.token_hex(32)


def is_allowed_email(email: str | None) -> bool:
    """True when the email's domain may sign in. No configured domains means any."""
    if not email or "@" not in email:
        return False
    domains = settings.allowed_domains_list
    if not domains:
        return True
    return email.lower().rsplit("@", 1)[1] in domains


def get_app_role(agent_role: str | AgentRole | None) -> AgentRole:
    """Normalize a stored role; anything unrecognized is a plain user."""
    if isinstance(agent_role, AgentRole):
        agent_role = agent_role.value
    normalized = (agent_role or "").strip().lower()
    if normalized == "superadmin":
        return AgentRole.superadmin
    if normalized == "admin":
        return AgentRole.admin
    return AgentRole.user


async def login_agent(
    db: AsyncSession,
    *,
    email: str,
    password: str,
) -> tuple[Agent, str]:
    """Authenticate an agent, create a session, return (agent, token).

    Raises HTTPException 401 on a disallowed domain or invalid credentials.
    """
    if not is_allowed_email(email):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    result = await db.execute(select(Agent).where(func.lower(Agent.email) == email.lower()))
    agent = result.scalar_one_or_none()

    if agent is None or not verify_password(password, agent.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = _generate_token()
    session = Session(
        agent_id=agent.id,
        token=token,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=settings.session_duration_hours),
    )
    db.add(session)
    await db.flush()
    logger.info("login agent_id=%s", agent.id)

    return agent, token


async def logout_agent(db: AsyncSession, *, token: str) -> None:
    """Revoke a session token."""
    result = await db.execute(select(Session).where(Session.token == token))
    session = result.scalar_one_or_none()
    if session is None:
        return

    session.revoked = True
    await db.flush()
    logger.info("logout agent_id=%s", session.agent_id)


async def get_current_agent(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Agent:
    """FastAPI dependency: extract and validate the session token, return the current agent.

    Raises HTTPException 401 if token is missing, invalid, expired, or revoked.
    """
    token = request.headers.get(SESSION_TOKEN_HEADER)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in.",
        )

    result = await db.execute(select(Session).where(Session.token == token))
    session = result.scalar_one_or_none()

    if session is None or session.revoked:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or revoked session",
        )

    expires_at = session.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at < datetime.now(timezone.utc):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired",
        )

    result = await db.execute(select(Agent).where(Agent.id == session.agent_id))
    agent = result.scalar_one_or_none()

    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Agent not found",
        )

    request.state.agent_id = str(agent.id)
    return agent


async def require_superadmin(agent: Agent = Depends(get_current_agent)) -> Agent:
    if get_app_role(agent.role) != AgentRole.superadmin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required.",
        )
    return agent


async def require_admin(agent: Agent = Depends(get_current_agent)) -> Agent:
    if get_app_role(agent.role) not in (AgentRole.admin, AgentRole.superadmin):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required.",
        )
    return agent
