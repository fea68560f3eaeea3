"""Agent administration: list, assign, change role, remove. Superadmin only at the router."""

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_password
from app.models.agent import Agent, AgentRole, Team
from app.models.base import utcnow
from app.models.session import Session

logger = logging.getLogger("credtrack.agents")


async def list_agents(db: AsyncSession) -> list[Agent]:
    result = await db.execute(select(Agent).order_by(Agent.last_name.asc(), Agent.first_name.asc()))
    return list(result.scalars().all())


async def get_agent_by_email(db: AsyncSession, email: str) -> Agent | None:
    result = await db.execute(select(Agent).where(func.lower(Agent.email) == email.lower()))
    return result.scalar_one_or_none()


async def assign_agent(
    db: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    email: str,
    team: Team,
    password: str,
    team_number: int | None = None,
    role: AgentRole = AgentRole.user,
) -> Agent:
    """Create an agent account. Raises 409 if the email is taken."""
    if await get_agent_by_email(db, email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An agent with this email already exists.",
        )

    agent = Agent(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=email.strip().lower(),
        team=team,
        team_number=team_number,
        role=role,
        password_hash=hash_password(password),
    )
    db.add(agent)
    await db.flush()
    logger.info("agent assigned id=%s role=%s", agent.id, role.value)
    return agent


async def _get_agent(db: AsyncSession, agent_id: uuid.UUID) -> Agent:
    agent = await db.get(Agent, agent_id)
    if agent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found.")
    return agent


async def update_agent_role(
    db: AsyncSession,
    *,
    agent_id: uuid.UUID,
    role: AgentRole,
) -> Agent:
    agent = await _get_agent(db, agent_id)
    agent.role = role
    agent.updated_at = utcnow()
    await db.flush()
    logger.info("agent role changed id=%s role=%s", agent.id, role.value)
    return agent


async def remove_agent(db: AsyncSession, *, agent_id: uuid.UUID) -> None:
    """Delete the agent and end all their sessions."""
    agent = await _get_agent(db, agent_id)
    await db.execute(delete(Session).where(Session.agent_id == agent_id))
    await db.delete(agent)
    await db.flush()
    logger.info("agent removed id=%s", agent_id)


async def ensure_bootstrap_superadmin(
    db: AsyncSession,
    *,
    email: str,
    password: str,
) -> Agent | None:
    """Create the first superadmin when no agents exist yet."""
    count = (await db.execute(select(func.count()).select_from(Agent))).scalar_one()
    if count:
        return None
    return await assign_agent(
        db,
        first_name="Super",
        last_name="Admin",
        email=email,
        team=Team.US,
        password=password,
        role=AgentRole.superadmin,
    )
