"""Communication log service: per-provider and per-facility interaction feeds.

Creates and edits are audit-logged and stamp the acting agent.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.comm_log import CommLog, RelatedType
from app.services import audit_service, record_service


async def _agent_names(db: AsyncSession, agent_ids: set[uuid.UUID]) -> dict[uuid.UUID, str]:
    if not agent_ids:
        return {}
    result = await db.execute(select(Agent).where(Agent.id.in_(agent_ids)))
    return {agent.id: agent.display_name for agent in result.scalars().all()}


async def with_agent_names(db: AsyncSession, logs: list[CommLog]) -> list[dict]:
    """Attach created_by_name / last_updated_by_name to each log."""
    ids = {i for log in logs for i in (log.created_by, log.last_updated_by) if i is not None}
    names = await _agent_names(db, ids)
    return [
        {
            **audit_service.columns(log),
            "created_by_name": names.get(log.created_by),
            "last_updated_by_name": names.get(log.last_updated_by),
        }
        for log in logs
    ]


async def list_logs(
    db: AsyncSession,
    *,
    related_type: RelatedType,
    related_id: uuid.UUID,
) -> list[dict]:
    """Logs about one provider or facility, newest first."""
    result = await db.execute(
        select(CommLog)
        .where(CommLog.related_type == related_type, CommLog.related_id == related_id)
        .order_by(CommLog.created_at.desc())
    )
    return await with_agent_names(db, list(result.scalars().all()))


async def create_log(
    db: AsyncSession,
    *,
    actor: Agent,
    related_type: RelatedType,
    related_id: uuid.UUID,
    comm_type: str,
    subject: str | None = None,
    notes: str | None = None,
) -> CommLog:
    return await record_service.create_record(
        db,
        CommLog,
        actor=actor,
        values={
            "related_type": related_type,
            "related_id": related_id,
            "comm_type": comm_type,
            "subject": subject,
            "notes": notes,
            "created_by": actor.id,
        },
    )


async def update_log(
    db: AsyncSession,
    *,
    log_id: uuid.UUID,
    actor: Agent,
    comm_type: str,
    subject: str | None = None,
    notes: str | None = None,
) -> CommLog:
    """Replace the editable fields; omitted subject/notes are cleared."""
    log = await record_service.get_or_404(db, CommLog, log_id, "Comm log")
    return await record_service.update_record(
        db,
        log,
        actor=actor,
        changes={
            "comm_type": comm_type,
            "subject": subject,
            "notes": notes,
            "last_updated_by": actor.id,
        },
    )
