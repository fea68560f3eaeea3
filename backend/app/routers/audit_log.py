"""Audit log routes: filtered listing (admins) and per-entity activity feed."""

import uuid as uuid_mod
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_agent, require_admin
from app.dependencies import get_db
from app.models.agent import Agent
from app.schemas.audit import AuditLogEntryRead, AuditLogPage
from app.services import audit_service

router = APIRouter(prefix="/audit-log", tags=["audit-log"])


@router.get("", response_model=AuditLogPage)
async def list_audit_log(
    from_date: date | None = None,
    to_date: date | None = None,
    action: Literal["all", "create", "update", "delete"] = "all",
    table_name: str | None = Query(None, max_length=100),
    actor_email: str | None = Query(None, max_length=255),
    record_id: str | None = Query(None, max_length=36),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(require_admin),
):
    rows, total = await audit_service.list_entries(
        db,
        from_date=from_date,
        to_date=to_date,
        action=action,
        table_name=table_name,
        actor_email=actor_email,
        record_id=record_id,
        limit=limit,
        offset=offset,
    )
    return {"rows": rows, "total": total}


@router.get("/entity/{entity_type}/{entity_id}", response_model=list[AuditLogEntryRead])
async def list_entity_activity(
    entity_type: Literal["provider", "facility"],
    entity_id: str,
    limit: int = Query(30, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    try:
        eid = uuid_mod.UUID(entity_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid entity_id")

    return await audit_service.list_for_entity(
        db, entity_type=entity_type, entity_id=eid, limit=limit, offset=offset
    )
