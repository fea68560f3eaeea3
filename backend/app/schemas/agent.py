import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.models.agent import AgentRole, Team


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    token: str
    agent_id: uuid.UUID
    role: AgentRole


class AgentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    team: Team
    team_number: int | None = Field(None, gt=0)
    role: AgentRole = AgentRole.user
    password: str = Field(..., min_length=8, max_length=128)


class AgentRoleUpdate(BaseModel):
    role: AgentRole


class AgentRead(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    team: Team
    team_number: int | None = None
    role: AgentRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
