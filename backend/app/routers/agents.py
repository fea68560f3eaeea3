"""Agent administration routes. Superadmin only."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_superadmin
from app.dependencies import get_db
from app.models.agent import Agent
from app.schemas.agent import AgentCreate, AgentRead, AgentRoleUpdate
from app.services import agent_service

router = APIRouter(prefix="/agents", tags=["agents"])


def _parse_agent_id(value: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid agent_id")


@router.get("", response_model=list[AgentRead])
async def list_agents(
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    return await agent_service.list_agents(db)


@router.post("", status_code=201, response_model=AgentRead)
async def assign_agent(
    body: AgentCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    return await agent_service.assign_agent(
        db,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        team=body.team,
        team_number=body.team_number,
        role=body.role,
        password=body.password,
    )


@router.patch("/{agent_id}/role", response_model=AgentRead)
async def update_agent_role(
    agent_id: str,
    body: AgentRoleUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    return await agent_service.update_agent_role(
        db, agent_id=_parse_agent_id(agent_id), role=body.role
    )


@router.delete("/{agent_id}")
async def remove_agent(
    agent_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_superadmin),
):
    await agent_service.remove_agent(db, agent_id=_parse_agent_id(agent_id))
    return {"status": "removed"}
