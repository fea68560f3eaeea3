import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_password
from app.models.agent import Agent, Team
from app.models.credential import ProviderFacilityCredential
from app.models.facility import Facility, FacilityPreliveInfo
from app.models.provider import Provider


async def _login(client: AsyncClient, db_session: AsyncSession) -> dict:
    db_session.add(
        Agent(
            first_name="Dash",
            last_name="Router",
            email="dash-r@example.com",
            team=Team.US,
            password_hash=hash_password("Pass1234!"),
        )
    )
    await db_session.commit()
    resp = await client.post(
        "/auth/login", json={"email": "dash-r@example.com", "password": "Pass1234!"}
    )
    return {"X-Session-Token": resp.json()["token"]}


async def _seed(db_session: AsyncSession) -> dict:
    ann = Provider(first_name="Ann", last_name="Adams", degree="MD")
    bob = Provider(first_name="Bob", last_name="Baker")
    north = Facility(name="North General", state="CA")
    south = Facility(name="South Clinic", state="TX")
    db_session.add_all([ann, bob, north, south])
    await db_session.flush()
    db_session.add_all([
        ProviderFacilityCredential(
            provider_id=ann.id, facility_id=north.id, priority="Stat", decision="Approved"
        ),
        ProviderFacilityCredential(
            provider_id=ann.id, facility_id=south.id, priority="Medium", decision="Pending"
        ),
        ProviderFacilityCredential(
            provider_id=bob.id, facility_id=north.id, priority="High",
            application_required=True,
        ),
        FacilityPreliveInfo(facility_id=north.id, priority="Top", temps_possible=True),
    ])
    await db_session.commit()
    return {"ann": ann, "bob": bob, "north": north, "south": south}


@pytest.mark.asyncio
async def test_rows_snapshot(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)
    await _seed(db_session)

    resp = await client.get("/dashboard/rows", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["provider_facility_rows"]) == 3
    assert len(data["facility_prelive_rows"]) == 1
    assert data["provider_license_rows"] == []
    names = {row["provider_name"] for row in data["provider_facility_rows"]}
    assert names == {"Adams, Ann", "Baker, Bob"}


@pytest.mark.asyncio
async def test_rows_require_auth(client: AsyncClient):
    resp = await client.get("/dashboard/rows")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_default_view_selects_first_group(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)
    seeded = await _seed(db_session)

    resp = await client.post(
        "/dashboard/view",
        json={"state": {"group_sort_field": "name", "group_sort_direction": "asc"}},
        headers=headers,
    )
    assert resp.status_code == 200
    view = resp.json()
    assert view["view"] == "provider_facility"
    assert view["view_label"] == "Provider-Level Facility Credentials"
    assert [g["label"] for g in view["groups"]] == ["Adams, Ann", "Baker, Bob"]
    assert view["selected_key"] == str(seeded["ann"].id)
    assert view["state"]["selected_key"] == str(seeded["ann"].id)
    assert view["record_count"] == 2
    assert view["display_dates"] == [{}, {}]
    assert view["is_empty"] is False


@pytest.mark.asyncio
async def test_filter_action_narrows_groups(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)
    seeded = await _seed(db_session)

    resp = await client.post(
        "/dashboard/view",
        json={"action": {"type": "set_filter", "name": "application", "value": "yes"}},
        headers=headers,
    )
    view = resp.json()
    assert view["state"]["filters"]["application"] == "yes"
    assert view["filtered_count"] == 1
    assert [g["key"] for g in view["groups"]] == [str(seeded["bob"].id)]


@pytest.mark.asyncio
async def test_switch_view_and_sort_detail(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)
    await _seed(db_session)

    resp = await client.post(
        "/dashboard/view",
        json={"action": {"type": "set_view", "view": "facility_provider"}},
        headers=headers,
    )
    view = resp.json()
    state = view["state"]
    assert view["view"] == "facility_provider"
    assert {g["label"] for g in view["groups"]} == {"North General", "South Clinic"}

    # Select North explicitly, then sort its rows by priority
    north_key = next(g["key"] for g in view["groups"] if g["label"] == "North General")
    resp = await client.post(
        "/dashboard/view",
        json={"state": state, "action": {"type": "select_group", "key": north_key}},
        headers=headers,
    )
    state = resp.json()["state"]
    resp = await client.post(
        "/dashboard/view",
        json={"state": state, "action": {"type": "sort_detail", "field": "priority"}},
        headers=headers,
    )
    view = resp.json()
    assert view["state"]["detail_sort_direction"] == "asc"
    assert [row["priority"] for row in view["rows"]] == ["Stat", "High"]


@pytest.mark.asyncio
async def test_empty_snapshot(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)

    resp = await client.post("/dashboard/view", json={}, headers=headers)
    view = resp.json()
    assert view["groups"] == []
    assert view["selected_key"] is None
    assert view["rows"] == []
    assert view["is_empty"] is True


@pytest.mark.asyncio
async def test_invalid_action_rejected(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session)

    resp = await client.post(
        "/dashboard/view",
        json={"action": {"type": "set_filter", "name": "temps_possible", "value": "maybe"}},
        headers=headers,
    )
    assert resp.status_code == 422

    resp = await client.post(
        "/dashboard/view", json={"action": {"type": "explode"}}, headers=headers
    )
    assert resp.status_code == 422
