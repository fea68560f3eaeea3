"""Facility service: facilities, contacts, pre-live records and provider credentials (PFC).

All writes audit-logged.
"""

import logging
import math
import uuid

from sqlalchemy import asc, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.base import utcnow
from app.models.credential import ProviderFacilityCredential
from app.models.facility import Facility, FacilityContact, FacilityPreliveInfo, FacilityStatus
from app.models.provider import Provider
from app.services import audit_service, record_service

logger = logging.getLogger("credtrack.facilities")

_SORT_COLUMNS = {
    "name": Facility.name,
    "state": Facility.state,
    "created_at": Facility.created_at,
}


# ── Facilities ──


async def create_facility(db: AsyncSession, *, actor: Agent, values: dict) -> Facility:
    return await record_service.create_record(db, Facility, actor=actor, values=values)


async def list_facilities(
    db: AsyncSession,
    *,
    page: int = 1,
    page_size: int = 15,
    search: str | None = None,
    active_only: bool = False,
    sort_by: str = "name",
    sort_order: str = "asc",
) -> dict:
    """One page of facilities plus paging totals."""
    conditions = []
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(
            or_(
                Facility.name.ilike(pattern),
                Facility.state.ilike(pattern),
                Facility.email.ilike(pattern),
                Facility.address.ilike(pattern),
                Facility.proxy.ilike(pattern),
            )
        )
    if active_only:
        conditions.append(Facility.status == FacilityStatus.active)

    order = desc if sort_order == "desc" else asc
    sort_col = _SORT_COLUMNS.get(sort_by, Facility.name)

    total = (
        await db.execute(select(func.count()).select_from(Facility).where(*conditions))
    ).scalar_one()
    result = await db.execute(
        select(Facility)
        .where(*conditions)
        .order_by(order(sort_col))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return {
        "items": list(result.scalars().all()),
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }


async def get_facility(db: AsyncSession, facility_id: uuid.UUID) -> Facility:
    return await record_service.get_or_404(db, Facility, facility_id, "Facility")


async def update_facility(
    db: AsyncSession,
    *,
    facility_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> Facility:
    facility = await get_facility(db, facility_id)
    return await record_service.update_record(db, facility, actor=actor, changes=changes)


async def delete_facility(db: AsyncSession, *, facility_id: uuid.UUID, actor: Agent) -> None:
    """Delete a facility with its contacts, pre-live records and provider credentials.

    Only the facility row itself is audit-logged.
    """
    facility = await get_facility(db, facility_id)

    await db.execute(delete(FacilityContact).where(FacilityContact.facility_id == facility_id))
    await db.execute(
        delete(FacilityPreliveInfo).where(FacilityPreliveInfo.facility_id == facility_id)
    )
    await db.execute(
        delete(ProviderFacilityCredential).where(
            ProviderFacilityCredential.facility_id == facility_id
        )
    )
    await record_service.delete_record(db, facility, actor=actor)
    logger.info("facility deleted id=%s actor=%s", facility_id, actor.id)


# ── Contacts ──


async def list_contacts(db: AsyncSession, facility_id: uuid.UUID) -> list[FacilityContact]:
    """Primary contacts first, then by name."""
    result = await db.execute(
        select(FacilityContact)
        .where(FacilityContact.facility_id == facility_id)
        .order_by(FacilityContact.is_primary.desc(), FacilityContact.name.asc())
    )
    return list(result.scalars().all())


async def create_contact(
    db: AsyncSession,
    *,
    facility_id: uuid.UUID,
    actor: Agent,
    values: dict,
) -> FacilityContact:
    await get_facility(db, facility_id)
    return await record_service.create_record(
        db, FacilityContact, actor=actor, values={**values, "facility_id": facility_id}
    )


async def update_contact(
    db: AsyncSession,
    *,
    contact_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> FacilityContact:
    contact = await record_service.get_or_404(db, FacilityContact, contact_id, "Contact")
    return await record_service.update_record(db, contact, actor=actor, changes=changes)


async def delete_contact(db: AsyncSession, *, contact_id: uuid.UUID, actor: Agent) -> None:
    contact = await record_service.get_or_404(db, FacilityContact, contact_id, "Contact")
    await record_service.delete_record(db, contact, actor=actor)


async def set_contact_primary(
    db: AsyncSession,
    *,
    contact_id: uuid.UUID,
    is_primary: bool,
    actor: Agent,
) -> FacilityContact:
    """Flip the primary flag. The audit entry carries only that flag."""
    contact = await record_service.get_or_404(db, FacilityContact, contact_id, "Contact")
    was_primary = contact.is_primary
    contact.is_primary = is_primary
    contact.updated_at = utcnow()
    await db.flush()

    await audit_service.write_audit_log(
        db,
        table_name=FacilityContact.__tablename__,
        record_id=contact.id,
        action="update",
        actor=actor,
        old_data={"is_primary": was_primary},
        new_data={"is_primary": is_primary},
    )
    return contact


# ── Pre-live ──


async def list_prelive(db: AsyncSession, facility_id: uuid.UUID) -> list[FacilityPreliveInfo]:
    result = await db.execute(
        select(FacilityPreliveInfo)
        .where(FacilityPreliveInfo.facility_id == facility_id)
        .order_by(FacilityPreliveInfo.updated_at.desc())
    )
    return list(result.scalars().all())


async def create_prelive(
    db: AsyncSession,
    *,
    facility_id: uuid.UUID,
    actor: Agent,
    values: dict,
) -> FacilityPreliveInfo:
    await get_facility(db, facility_id)
    return await record_service.create_record(
        db, FacilityPreliveInfo, actor=actor, values={**values, "facility_id": facility_id}
    )


async def update_prelive(
    db: AsyncSession,
    *,
    prelive_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> FacilityPreliveInfo:
    info = await record_service.get_or_404(db, FacilityPreliveInfo, prelive_id, "Pre-live record")
    return await record_service.update_record(db, info, actor=actor, changes=changes)


async def delete_prelive(db: AsyncSession, *, prelive_id: uuid.UUID, actor: Agent) -> None:
    info = await record_service.get_or_404(db, FacilityPreliveInfo, prelive_id, "Pre-live record")
    await record_service.delete_record(db, info, actor=actor)


# ── Provider-facility credentials ──


async def list_credentials(
    db: AsyncSession, facility_id: uuid.UUID
) -> list[ProviderFacilityCredential]:
    result = await db.execute(
        select(ProviderFacilityCredential)
        .where(ProviderFacilityCredential.facility_id == facility_id)
        .order_by(ProviderFacilityCredential.updated_at.desc())
    )
    return list(result.scalars().all())


async def create_credential(
    db: AsyncSession,
    *,
    facility_id: uuid.UUID,
    provider_id: uuid.UUID,
    actor: Agent,
    values: dict,
) -> ProviderFacilityCredential:
    await get_facility(db, facility_id)
    await record_service.get_or_404(db, Provider, provider_id, "Provider")
    return await record_service.create_record(
        db,
        ProviderFacilityCredential,
        actor=actor,
        values={**values, "facility_id": facility_id, "provider_id": provider_id},
    )


async def update_credential(
    db: AsyncSession,
    *,
    credential_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> ProviderFacilityCredential:
    pfc = await record_service.get_or_404(
        db, ProviderFacilityCredential, credential_id, "Credential record"
    )
    return await record_service.update_record(db, pfc, actor=actor, changes=changes)


async def delete_credential(db: AsyncSession, *, credential_id: uuid.UUID, actor: Agent) -> None:
    pfc = await record_service.get_or_404(
        db, ProviderFacilityCredential, credential_id, "Credential record"
    )
    await record_service.delete_record(db, pfc, actor=actor)
