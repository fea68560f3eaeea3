"""Auth routes: login, logout, current agent."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    SESSION_TOKEN_HEADER,
    get_app_role,
    get_current_agent,
    login_agent,
    logout_agent,
)
from app.dependencies import get_db
from app.models.agent import Agent
from app.schemas.agent import AgentRead, LoginRequest, LoginResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    agent, token = await login_agent(db, email=body.email, password=body.password)
    return {"token": token, "agent_id": agent.id, "role": get_app_role(agent.role)}


@router.post("/logout", status_code=204)
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    token = request.headers.get(SESSION_TOKEN_HEADER)
    await logout_agent(db, token=token)


@router.get("/me", response_model=AgentRead)
async def me(current_agent: Agent = Depends(get_current_agent)):
    return current_agent
