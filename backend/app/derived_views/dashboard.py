"""Dashboard snapshot loader.

Fetches the four queryable relations once, left-joined to their provider or
facility, and maps them to flat rows:
- Provider and facility names resolved to display strings
- Dates and timestamps as ISO strings (or None)
- roles_needed normalised to a list of strings
"""

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.derived_views.rows import (
    DashboardSnapshot,
    FacilityPreliveRow,
    PastPrivilege,
    ProviderFacilityRow,
    ProviderLicenseRow,
    ProviderPrivilegeRow,
)
from app.models.credential import ProviderFacilityCredential
from app.models.facility import Facility, FacilityPreliveInfo
from app.models.provider import Provider, ProviderStateLicense, ProviderVestaPrivilege

logger = logging.getLogger("credtrack.dashboard")

UNNAMED_PROVIDER = "Unnamed Provider"
UNNAMED_FACILITY = "Unnamed Facility"


def format_provider_name(
    first_name: str | None,
    middle_name: str | None,
    last_name: str | None,
) -> str:
    """Display name as "Last, First Middle" from whichever parts exist."""
    given = " ".join(p.strip() for p in (first_name, middle_name) if p and p.strip())
    last = (last_name or "").strip()
    if last and given:
        return f"{last}, {given}"
    return last or given or UNNAMED_PROVIDER


def parse_roles(value) -> list[str]:
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str_id(value) -> str | None:
    return str(value) if value is not None else None


def _enum_value(value) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def _provider_name(provider: Provider | None) -> str:
    if provider is None:
        return UNNAMED_PROVIDER
    return format_provider_name(provider.first_name, provider.middle_name, provider.last_name)


def _facility_name(facility: Facility | None) -> str:
    if facility is None or not facility.name:
        return UNNAMED_FACILITY
    return facility.name


def _past_privileges(value) -> tuple[PastPrivilege, ...]:
    if not isinstance(value, list):
        return ()
    entries = []
    for item in value:
        if not isinstance(item, dict):
            continue
        entries.append(
            PastPrivilege(
                approved_at=item.get("approved_at"),
                expires_at=item.get("expires_at"),
                tier=item.get("tier"),
            )
        )
    return tuple(entries)


async def provider_facility_rows(db: AsyncSession) -> list[ProviderFacilityRow]:
    """PFC links with provider and facility resolved. Feeds both PFC views."""
    result = await db.execute(
        select(ProviderFacilityCredential, Provider, Facility)
        .outerjoin(Provider, ProviderFacilityCredential.provider_id == Provider.id)
        .outerjoin(Facility, ProviderFacilityCredential.facility_id == Facility.id)
        .order_by(ProviderFacilityCredential.updated_at.desc())
    )
    return [
        ProviderFacilityRow(
            id=str(pfc.id),
            updated_at=_iso(pfc.updated_at),
            provider_id=_str_id(pfc.provider_id),
            provider_name=_provider_name(provider),
            provider_degree=provider.degree if provider else None,
            facility_id=_str_id(pfc.facility_id),
            facility_name=_facility_name(facility),
            facility_state=facility.state if facility else None,
            priority=pfc.priority,
            privileges=pfc.privileges,
            decision=pfc.decision,
            facility_type=pfc.facility_type,
            application_required=pfc.application_required,
        )
        for pfc, provider, facility in result.all()
    ]


async def facility_prelive_rows(db: AsyncSession) -> list[FacilityPreliveRow]:
    result = await db.execute(
        select(FacilityPreliveInfo, Facility)
        .outerjoin(Facility, FacilityPreliveInfo.facility_id == Facility.id)
        .order_by(FacilityPreliveInfo.updated_at.desc())
    )
    return [
        FacilityPreliveRow(
            id=str(info.id),
            updated_at=_iso(info.updated_at),
            facility_id=_str_id(info.facility_id),
            facility_name=_facility_name(facility),
            facility_state=facility.state if facility else None,
            priority=info.priority,
            go_live_date=_iso(info.go_live_date),
            credentialing_due_date=_iso(info.credentialing_due_date),
            board_meeting_date=_iso(info.board_meeting_date),
            temps_possible=info.temps_possible,
            payor_enrollment_required=info.payor_enrollment_required,
            roles_needed=tuple(parse_roles(info.roles_needed)),
        )
        for info, facility in result.all()
    ]


async def provider_license_rows(db: AsyncSession) -> list[ProviderLicenseRow]:
    result = await db.execute(
        select(ProviderStateLicense, Provider)
        .outerjoin(Provider, ProviderStateLicense.provider_id == Provider.id)
        .order_by(ProviderStateLicense.updated_at.desc())
    )
    return [
        ProviderLicenseRow(
            id=str(lic.id),
            updated_at=_iso(lic.updated_at),
            provider_id=_str_id(lic.provider_id),
            provider_name=_provider_name(provider),
            provider_degree=provider.degree if provider else None,
            state=lic.state,
            priority=lic.priority,
            status=lic.status,
            path=lic.path,
            initial_or_renewal=_enum_value(lic.initial_or_renewal),
            starts_at=_iso(lic.starts_at),
            expires_at=_iso(lic.expires_at),
        )
        for lic, provider in result.all()
    ]


async def provider_privilege_rows(db: AsyncSession) -> list[ProviderPrivilegeRow]:
    result = await db.execute(
        select(ProviderVestaPrivilege, Provider)
        .outerjoin(Provider, ProviderVestaPrivilege.provider_id == Provider.id)
        .order_by(ProviderVestaPrivilege.updated_at.desc())
    )
    return [
        ProviderPrivilegeRow(
            id=str(priv.id),
            updated_at=_iso(priv.updated_at),
            provider_id=_str_id(priv.provider_id),
            provider_name=_provider_name(provider),
            provider_degree=provider.degree if provider else None,
            privilege_tier=_enum_value(priv.privilege_tier),
            current_priv_init_date=_iso(priv.current_priv_init_date),
            current_priv_end_date=_iso(priv.current_priv_end_date),
            term_date=_iso(priv.term_date),
            term_reason=priv.term_reason,
            past_privileges=_past_privileges(priv.past_privileges),
        )
        for priv, provider in result.all()
    ]


async def load_dashboard_snapshot(db: AsyncSession) -> DashboardSnapshot:
    """One consistent read of every dashboard relation."""
    snapshot = DashboardSnapshot(
        provider_facility_rows=tuple(await provider_facility_rows(db)),
        facility_prelive_rows=tuple(await facility_prelive_rows(db)),
        provider_license_rows=tuple(await provider_license_rows(db)),
        provider_privilege_rows=tuple(await provider_privilege_rows(db)),
    )
    logger.debug(
        "snapshot pfc=%d prelive=%d licenses=%d privileges=%d",
        len(snapshot.provider_facility_rows),
        len(snapshot.facility_prelive_rows),
        len(snapshot.provider_license_rows),
        len(snapshot.provider_privilege_rows),
    )
    return snapshot
