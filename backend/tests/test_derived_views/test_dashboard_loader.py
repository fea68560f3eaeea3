"""Dashboard loader tests: rows joined and mapped from the database."""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.derived_views.dashboard import (
    format_provider_name,
    load_dashboard_snapshot,
    parse_roles,
)
from app.models.credential import ProviderFacilityCredential
from app.models.facility import Facility, FacilityPreliveInfo
from app.models.provider import (
    InitialOrRenewal,
    PrivilegeTier,
    Provider,
    ProviderStateLicense,
    ProviderVestaPrivilege,
)


def test_format_provider_name():
    assert format_provider_name("Ann", "B", "Adams") == "Adams, Ann B"
    assert format_provider_name(None, None, "Adams") == "Adams"
    assert format_provider_name("Ann", "B", None) == "Ann B"
    assert format_provider_name(" ", None, "") == "Unnamed Provider"


def test_parse_roles():
    assert parse_roles(["RN", 3, "MD"]) == ["RN", "MD"]
    assert parse_roles("RN, MD ,,") == ["RN", "MD"]
    assert parse_roles(None) == []
    assert parse_roles({"role": "RN"}) == []


async def _seed(db: AsyncSession) -> tuple[Provider, Facility]:
    provider = Provider(first_name="Ann", last_name="Adams", degree="MD")
    facility = Facility(name="North General", state="CA")
    db.add_all([provider, facility])
    await db.flush()
    return provider, facility


@pytest.mark.asyncio
async def test_snapshot_maps_joined_rows(db_session: AsyncSession):
    provider, facility = await _seed(db_session)
    db_session.add_all([
        ProviderFacilityCredential(
            provider_id=provider.id,
            facility_id=facility.id,
            priority="STAT",
            decision="Approved",
            application_required=True,
        ),
        FacilityPreliveInfo(
            facility_id=facility.id,
            go_live_date=date(2025, 3, 1),
            roles_needed=["Radiologist", 7],
        ),
        ProviderStateLicense(
            provider_id=provider.id,
            state="TX",
            initial_or_renewal=InitialOrRenewal.renewal,
            expires_at=date(2026, 1, 31),
        ),
        ProviderVestaPrivilege(
            provider_id=provider.id,
            privilege_tier=PrivilegeTier.in_progress,
            past_privileges=[{"approved_at": "2023-01-01", "expires_at": "2024-01-01"}, "junk"],
        ),
    ])
    await db_session.commit()

    snapshot = await load_dashboard_snapshot(db_session)

    (pfc,) = snapshot.provider_facility_rows
    assert pfc.provider_id == str(provider.id)
    assert pfc.provider_name == "Adams, Ann"
    assert pfc.provider_degree == "MD"
    assert pfc.facility_name == "North General"
    assert pfc.facility_state == "CA"
    assert pfc.application_required is True
    assert pfc.updated_at is not None

    (prelive,) = snapshot.facility_prelive_rows
    assert prelive.go_live_date == "2025-03-01"
    assert prelive.roles_needed == ("Radiologist",)
    assert prelive.temps_possible is None

    (lic,) = snapshot.provider_license_rows
    assert lic.initial_or_renewal == "renewal"
    assert lic.expires_at == "2026-01-31"
    assert lic.starts_at is None

    (priv,) = snapshot.provider_privilege_rows
    assert priv.privilege_tier == "In Progress"
    assert len(priv.past_privileges) == 1
    assert priv.past_privileges[0].approved_at == "2023-01-01"


@pytest.mark.asyncio
async def test_snapshot_handles_missing_parents(db_session: AsyncSession):
    db_session.add(ProviderFacilityCredential(priority="high"))
    await db_session.commit()

    snapshot = await load_dashboard_snapshot(db_session)
    (row,) = snapshot.provider_facility_rows
    assert row.provider_id is None
    assert row.provider_name == "Unnamed Provider"
    assert row.facility_name == "Unnamed Facility"


@pytest.mark.asyncio
async def test_snapshot_newest_first(db_session: AsyncSession):
    provider, _ = await _seed(db_session)
    db_session.add_all([
        ProviderStateLicense(
            provider_id=provider.id,
            state="CA",
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        ProviderStateLicense(
            provider_id=provider.id,
            state="NY",
            updated_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
        ),
    ])
    await db_session.commit()

    snapshot = await load_dashboard_snapshot(db_session)
    assert [r.state for r in snapshot.provider_license_rows] == ["NY", "CA"]
