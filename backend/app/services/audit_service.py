"""Audit service: append-only change log with old/new row snapshots.

All writes are append-only. No update or delete methods are exposed.
"""

import enum
import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import String, cast, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.audit import AuditLogEntry
from app.models.credential import ProviderFacilityCredential
from app.models.facility import FacilityContact, FacilityPreliveInfo
from app.models.provider import ProviderStateLicense, ProviderVestaPrivilege

logger = logging.getLogger("credtrack.audit")

AUDIT_ACTIONS = ("create", "update", "delete")


def _json_safe(value):
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    return value


def columns(obj) -> dict:
    """Raw column values of an ORM row, keyed by attribute name."""
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


def snapshot(obj) -> dict:
    """Column values of an ORM row as a JSON-serialisable dict."""
    return {key: _json_safe(value) for key, value in columns(obj).items()}


async def write_audit_log(
    db: AsyncSession,
    *,
    table_name: str,
    record_id: uuid.UUID | None,
    action: str,
    actor: Agent | None,
    old_data: dict | None = None,
    new_data: dict | None = None,
) -> AuditLogEntry:
    """Append one audit entry for a mutation."""
    if action not in AUDIT_ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")

    entry = AuditLogEntry(
        table_name=table_name,
        record_id=record_id,
        action=action,
        actor_id=actor.id if actor else None,
        actor_email=actor.email if actor else None,
        old_data=old_data or {},
        new_data=new_data or {},
    )
    db.add(entry)
    await db.flush()
    logger.debug(
        "audit table=%s record=%s action=%s actor=%s",
        table_name, record_id, action, entry.actor_email,
    )
    return entry


def _day_start(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)


async def list_entries(
    db: AsyncSession,
    *,
    from_date: date | None = None,
    to_date: date | None = None,
    action: str | None = None,
    table_name: str | None = None,
    actor_email: str | None = None,
    record_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[AuditLogEntry], int]:
    """Filtered audit entries, newest first, plus the unpaginated total."""
    conditions = []
    if from_date is not None:
        conditions.append(AuditLogEntry.created_at >= _day_start(from_date))
    if to_date is not None:
        # Include the entire to_date day
        conditions.append(AuditLogEntry.created_at < _day_start(to_date + timedelta(days=1)))
    if action and action != "all":
        conditions.append(AuditLogEntry.action == action)
    if table_name and table_name != "all":
        conditions.append(AuditLogEntry.table_name == table_name)
    if actor_email:
        conditions.append(AuditLogEntry.actor_email.ilike(f"%{actor_email}%"))
    if record_id:
        conditions.append(cast(AuditLogEntry.record_id, String).ilike(f"%{record_id}%"))

    total = (
        await db.execute(select(func.count()).select_from(AuditLogEntry).where(*conditions))
    ).scalar_one()

    result = await db.execute(
        select(AuditLogEntry)
        .where(*conditions)
        .order_by(AuditLogEntry.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def _ids(db: AsyncSession, column, fk_column, entity_id: uuid.UUID) -> list[uuid.UUID]:
    result = await db.execute(select(column).where(fk_column == entity_id))
    return list(result.scalars().all())


async def list_for_entity(
    db: AsyncSession,
    *,
    entity_type: str,
    entity_id: uuid.UUID,
    limit: int = 30,
    offset: int = 0,
) -> list[AuditLogEntry]:
    """Activity feed for a provider or facility, including its child records.

    Provider: the provider, its licenses, privileges and PFC links.
    Facility: the facility, its contacts, pre-live records and PFC links.
    """
    record_ids: list[uuid.UUID] = [entity_id]
    if entity_type == "provider":
        record_ids += await _ids(
            db, ProviderStateLicense.id, ProviderStateLicense.provider_id, entity_id
        )
        record_ids += await _ids(
            db, ProviderVestaPrivilege.id, ProviderVestaPrivilege.provider_id, entity_id
        )
        record_ids += await _ids(
            db, ProviderFacilityCredential.id, ProviderFacilityCredential.provider_id, entity_id
        )
    elif entity_type == "facility":
        record_ids += await _ids(db, FacilityContact.id, FacilityContact.facility_id, entity_id)
        record_ids += await _ids(
            db, FacilityPreliveInfo.id, FacilityPreliveInfo.facility_id, entity_id
        )
        record_ids += await _ids(
            db, ProviderFacilityCredential.id, ProviderFacilityCredential.facility_id, entity_id
        )
    else:
        raise ValueError(f"Unknown entity type: {entity_type}")

    result = await db.execute(
        select(AuditLogEntry)
        .where(AuditLogEntry.record_id.in_(record_ids))
        .order_by(AuditLogEntry.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())
