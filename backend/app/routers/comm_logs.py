"""Communication log routes: feeds per provider/facility, create, edit."""

import uuid as uuid_mod

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_agent
from app.dependencies import get_db
from app.models.agent import Agent
from app.models.comm_log import RelatedType
from app.schemas.comm_log import CommLogCreate, CommLogRead, CommLogUpdate
from app.services import comm_log_service

router = APIRouter(prefix="/comm-logs", tags=["comm-logs"])


def _parse_related_type(value: str) -> RelatedType:
    try:
        return RelatedType(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid related_type: {value}")


def _parse_id(value: str, name: str) -> uuid_mod.UUID:
    try:
        return uuid_mod.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")


@router.get("/{related_type}/{related_id}", response_model=list[CommLogRead])
async def list_logs(
    related_type: str,
    related_id: str,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await comm_log_service.list_logs(
        db,
        related_type=_parse_related_type(related_type),
        related_id=_parse_id(related_id, "related_id"),
    )


@router.post("", status_code=201, response_model=CommLogRead)
async def create_log(
    body: CommLogCreate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    log = await comm_log_service.create_log(
        db,
        actor=current_agent,
        related_type=body.related_type,
        related_id=body.related_id,
        comm_type=body.comm_type,
        subject=body.subject,
        notes=body.notes,
    )
    return (await comm_log_service.with_agent_names(db, [log]))[0]


@router.patch("/{log_id}", response_model=CommLogRead)
async def update_log(
    log_id: str,
    body: CommLogUpdate,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    log = await comm_log_service.update_log(
        db,
        log_id=_parse_id(log_id, "log_id"),
        actor=current_agent,
        comm_type=body.comm_type,
        subject=body.subject,
        notes=body.notes,
    )
    return (await comm_log_service.with_agent_names(db, [log]))[0]
