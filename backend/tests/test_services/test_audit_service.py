import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.agent import Agent, Team
from app.models.audit import AuditLogEntry
from app.models.facility import Facility, FacilityContact
from app.models.provider import Provider, ProviderStateLicense
from app.services import audit_service


async def _create_agent(db_session: AsyncSession) -> Agent:
    agent = Agent(
        first_name="Audit",
        last_name="Agent",
        email="audit-svc@example.com",
        team=Team.IN,
        password_hash="fakehash",
    )
    db_session.add(agent)
    await db_session.commit()
    await db_session.refresh(agent)
    return agent


def _entry(table_name: str, action: str, created_at: datetime, record_id=None, email=None):
    return AuditLogEntry(
        table_name=table_name,
        record_id=record_id or uuid.uuid4(),
        action=action,
        actor_email=email,
        created_at=created_at,
    )


@pytest.mark.asyncio
async def test_write_audit_log(db_session: AsyncSession):
    agent = await _create_agent(db_session)
    record_id = uuid.uuid4()

    entry = await audit_service.write_audit_log(
        db_session,
        table_name="providers",
        record_id=record_id,
        action="update",
        actor=agent,
        old_data={"degree": None},
        new_data={"degree": "MD"},
    )
    await db_session.commit()

    assert entry.id is not None
    assert entry.actor_id == agent.id
    assert entry.actor_email == "audit-svc@example.com"
    assert entry.old_data == {"degree": None}
    assert entry.new_data == {"degree": "MD"}


@pytest.mark.asyncio
async def test_write_audit_log_defaults_and_no_actor(db_session: AsyncSession):
    entry = await audit_service.write_audit_log(
        db_session, table_name="providers", record_id=None, action="create", actor=None
    )
    assert entry.actor_id is None
    assert entry.old_data == {}
    assert entry.new_data == {}


@pytest.mark.asyncio
async def test_write_audit_log_rejects_unknown_action(db_session: AsyncSession):
    with pytest.raises(ValueError):
        await audit_service.write_audit_log(
            db_session, table_name="providers", record_id=None, action="archive", actor=None
        )


@pytest.mark.asyncio
async def test_snapshot_is_json_safe(db_session: AsyncSession):
    lic = ProviderStateLicense(state="CA", expires_at=date(2025, 1, 31))
    db_session.add(lic)
    await db_session.flush()

    data = audit_service.snapshot(lic)
    assert data["id"] == str(lic.id)
    assert data["expires_at"] == "2025-01-31"
    assert data["state"] == "CA"
    assert isinstance(data["created_at"], str)


@pytest.mark.asyncio
async def test_columns_keep_raw_values_behind_snapshot(db_session: AsyncSession):
    lic = ProviderStateLicense(state="CA", expires_at=date(2025, 1, 31))
    db_session.add(lic)
    await db_session.flush()

    raw = audit_service.columns(lic)
    assert raw["id"] == lic.id
    assert raw["expires_at"] == date(2025, 1, 31)
    assert set(raw) == set(audit_service.snapshot(lic))


@pytest.mark.asyncio
async def test_list_entries_filters(db_session: AsyncSession):
    db_session.add_all([
        _entry("providers", "create", datetime(2024, 3, 1, 9, tzinfo=timezone.utc),
               email="ann@vesta.com"),
        _entry("providers", "update", datetime(2024, 3, 2, 23, 30, tzinfo=timezone.utc),
               email="bob@vesta.com"),
        _entry("facilities", "delete", datetime(2024, 3, 5, tzinfo=timezone.utc),
               email="ann@vesta.com"),
    ])
    await db_session.commit()

    rows, total = await audit_service.list_entries(db_session)
    assert total == 3
    assert [r.action for r in rows] == ["delete", "update", "create"]

    # to_date covers the whole day
    rows, total = await audit_service.list_entries(
        db_session, from_date=date(2024, 3, 1), to_date=date(2024, 3, 2)
    )
    assert total == 2

    rows, total = await audit_service.list_entries(db_session, action="delete")
    assert [r.table_name for r in rows] == ["facilities"]

    rows, total = await audit_service.list_entries(db_session, action="all", table_name="providers")
    assert total == 2

    rows, total = await audit_service.list_entries(db_session, actor_email="ANN")
    assert total == 2

    rows, total = await audit_service.list_entries(db_session, limit=1, offset=1)
    assert total == 3
    assert [r.action for r in rows] == ["update"]


@pytest.mark.asyncio
async def test_list_for_entity_includes_children(db_session: AsyncSession):
    provider = Provider(last_name="Adams")
    facility = Facility(name="North")
    db_session.add_all([provider, facility])
    await db_session.flush()
    lic = ProviderStateLicense(provider_id=provider.id, state="CA")
    contact = FacilityContact(facility_id=facility.id, name="Pat")
    db_session.add_all([lic, contact])
    await db_session.flush()

    now = datetime.now(timezone.utc)
    db_session.add_all([
        _entry("providers", "create", now, record_id=provider.id),
        _entry("provider_state_licenses", "create", now, record_id=lic.id),
        _entry("facilities", "create", now, record_id=facility.id),
        _entry("facility_contacts", "create", now, record_id=contact.id),
    ])
    await db_session.commit()

    provider_feed = await audit_service.list_for_entity(
        db_session, entity_type="provider", entity_id=provider.id
    )
    assert {e.table_name for e in provider_feed} == {"providers", "provider_state_licenses"}

    facility_feed = await audit_service.list_for_entity(
        db_session, entity_type="facility", entity_id=facility.id
    )
    assert {e.table_name for e in facility_feed} == {"facilities", "facility_contacts"}

    with pytest.raises(ValueError):
        await audit_service.list_for_entity(
            db_session, entity_type="agent", entity_id=provider.id
        )
