"""Shared mutation path for credentialing records.

Every create/update/delete goes through here so that each one:
- Cleans form input (blank strings to None, states upper, emails lower)
- Refreshes updated_at on change
- Writes exactly one audit entry with old/new column snapshots
"""

import enum
import uuid

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.base import utcnow
from app.services import audit_service


def to_null(value: str | None) -> str | None:
    """Trim a form value; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def clean_values(values: dict) -> dict:
    cleaned = {}
    for key, value in values.items():
        if isinstance(value, str) and not isinstance(value, enum.Enum):
            value = to_null(value)
            if value is not None and key == "state":
                value = value.upper()
            elif value is not None and key == "email":
                value = value.lower()
        cleaned[key] = value
    return cleaned


async def get_or_404(db: AsyncSession, model, record_id: uuid.UUID, label: str):
    record = await db.get(model, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found.",
        )
    return record


async def create_record(
    db: AsyncSession,
    model,
    *,
    actor: Agent | None,
    values: dict,
):
    record = model(**clean_values(values))
    db.add(record)
    await db.flush()

    await audit_service.write_audit_log(
        db,
        table_name=model.__tablename__,
        record_id=record.id,
        action="create",
        actor=actor,
        new_data=audit_service.snapshot(record),
    )
    return record


async def update_record(
    db: AsyncSession,
    record,
    *,
    actor: Agent | None,
    changes: dict,
):
    """Apply only the fields the caller sent. An empty change set still bumps updated_at."""
    old_data = audit_service.snapshot(record)
    for key, value in clean_values(changes).items():
        setattr(record, key, value)
    record.updated_at = utcnow()
    await db.flush()

    await audit_service.write_audit_log(
        db,
        table_name=record.__tablename__,
        record_id=record.id,
        action="update",
        actor=actor,
        old_data=old_data,
        new_data=audit_service.snapshot(record),
    )
    return record


async def delete_record(
    db: AsyncSession,
    record,
    *,
    actor: Agent | None,
) -> None:
    old_data = audit_service.snapshot(record)
    record_id = record.id
    await db.delete(record)
    await db.flush()

    await audit_service.write_audit_log(
        db,
        table_name=record.__tablename__,
        record_id=record_id,
        action="delete",
        actor=actor,
        old_data=old_data,
    )
