"""Provider service: providers, their state licenses and Vesta privileges.

All writes audit-logged through record_service.
"""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent
from app.models.credential import ProviderFacilityCredential
from app.models.provider import Provider, ProviderStateLicense, ProviderVestaPrivilege
from app.services import record_service

logger = logging.getLogger("credtrack.providers")


# ── Providers ──


async def create_provider(db: AsyncSession, *, actor: Agent, values: dict) -> Provider:
    return await record_service.create_record(db, Provider, actor=actor, values=values)


async def get_provider(db: AsyncSession, provider_id: uuid.UUID) -> Provider:
    return await record_service.get_or_404(db, Provider, provider_id, "Provider")


async def update_provider(
    db: AsyncSession,
    *,
    provider_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> Provider:
    provider = await get_provider(db, provider_id)
    return await record_service.update_record(db, provider, actor=actor, changes=changes)


async def delete_provider(
    db: AsyncSession,
    *,
    provider_id: uuid.UUID,
    actor: Agent,
) -> None:
    """Delete a provider with its licenses, privileges and facility credentials.

    Only the provider row itself is audit-logged.
    """
    provider = await get_provider(db, provider_id)

    await db.execute(
        delete(ProviderStateLicense).where(ProviderStateLicense.provider_id == provider_id)
    )
    await db.execute(
        delete(ProviderVestaPrivilege).where(ProviderVestaPrivilege.provider_id == provider_id)
    )
    await db.execute(
        delete(ProviderFacilityCredential).where(
            ProviderFacilityCredential.provider_id == provider_id
        )
    )
    await record_service.delete_record(db, provider, actor=actor)
    logger.info("provider deleted id=%s actor=%s", provider_id, actor.id)


# ── State licenses ──


async def list_licenses(db: AsyncSession, provider_id: uuid.UUID) -> list[ProviderStateLicense]:
    result = await db.execute(
        select(ProviderStateLicense)
        .where(ProviderStateLicense.provider_id == provider_id)
        .order_by(ProviderStateLicense.updated_at.desc())
    )
    return list(result.scalars().all())


async def create_license(
    db: AsyncSession,
    *,
    provider_id: uuid.UUID,
    actor: Agent,
    values: dict,
) -> ProviderStateLicense:
    await get_provider(db, provider_id)
    return await record_service.create_record(
        db, ProviderStateLicense, actor=actor, values={**values, "provider_id": provider_id}
    )


async def update_license(
    db: AsyncSession,
    *,
    license_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> ProviderStateLicense:
    lic = await record_service.get_or_404(db, ProviderStateLicense, license_id, "License")
    return await record_service.update_record(db, lic, actor=actor, changes=changes)


async def delete_license(db: AsyncSession, *, license_id: uuid.UUID, actor: Agent) -> None:
    lic = await record_service.get_or_404(db, ProviderStateLicense, license_id, "License")
    await record_service.delete_record(db, lic, actor=actor)


# ── Vesta privileges ──


async def list_privileges(
    db: AsyncSession, provider_id: uuid.UUID
) -> list[ProviderVestaPrivilege]:
    result = await db.execute(
        select(ProviderVestaPrivilege)
        .where(ProviderVestaPrivilege.provider_id == provider_id)
        .order_by(ProviderVestaPrivilege.updated_at.desc())
    )
    return list(result.scalars().all())


async def create_privilege(
    db: AsyncSession,
    *,
    provider_id: uuid.UUID,
    actor: Agent,
    values: dict,
) -> ProviderVestaPrivilege:
    await get_provider(db, provider_id)
    return await record_service.create_record(
        db, ProviderVestaPrivilege, actor=actor, values={**values, "provider_id": provider_id}
    )


async def update_privilege(
    db: AsyncSession,
    *,
    privilege_id: uuid.UUID,
    actor: Agent,
    changes: dict,
) -> ProviderVestaPrivilege:
    priv = await record_service.get_or_404(
        db, ProviderVestaPrivilege, privilege_id, "Privilege record"
    )
    return await record_service.update_record(db, priv, actor=actor, changes=changes)


async def delete_privilege(db: AsyncSession, *, privilege_id: uuid.UUID, actor: Agent) -> None:
    priv = await record_service.get_or_404(
        db, ProviderVestaPrivilege, privilege_id, "Privilege record"
    )
    await record_service.delete_record(db, priv, actor=actor)
