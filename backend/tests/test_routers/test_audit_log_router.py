import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_password
from app.models.agent import Agent, AgentRole, Team


async def _login(
    client: AsyncClient,
    db_session: AsyncSession,
    email: str,
    role: AgentRole,
) -> dict:
    db_session.add(
        Agent(
            first_name="Audit",
            last_name="Router",
            email=email,
            team=Team.US,
            role=role,
            password_hash=hash_password("Pass1234!"),
        )
    )
    await db_session.commit()
    resp = await client.post("/auth/login", json={"email": email, "password": "Pass1234!"})
    return {"X-Session-Token": resp.json()["token"]}


@pytest.mark.asyncio
async def test_mutations_show_in_audit_log(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session, "audit-admin@example.com", AgentRole.admin)

    provider_id = (
        await client.post("/providers", json={"last_name": "Adams"}, headers=headers)
    ).json()["id"]
    await client.patch(f"/providers/{provider_id}", json={"degree": "MD"}, headers=headers)
    await client.post("/facilities", json={"name": "North"}, headers=headers)

    resp = await client.get("/audit-log", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert {r["action"] for r in data["rows"]} == {"create", "update"}
    assert all(r["actor_email"] == "audit-admin@example.com" for r in data["rows"])

    resp = await client.get(
        "/audit-log", params={"table_name": "providers", "action": "update"}, headers=headers
    )
    (row,) = resp.json()["rows"]
    assert row["old_data"]["degree"] is None
    assert row["new_data"]["degree"] == "MD"

    resp = await client.get("/audit-log", params={"action": "archive"}, headers=headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_audit_log_requires_admin(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session, "audit-user@example.com", AgentRole.user)
    resp = await client.get("/audit-log", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Admin access required."


@pytest.mark.asyncio
async def test_entity_feed_open_to_agents(client: AsyncClient, db_session: AsyncSession):
    headers = await _login(client, db_session, "feed-user@example.com", AgentRole.user)

    provider_id = (
        await client.post("/providers", json={"last_name": "Adams"}, headers=headers)
    ).json()["id"]
    await client.post(
        "/providers/licenses", json={"provider_id": provider_id, "state": "CA"}, headers=headers
    )

    resp = await client.get(f"/audit-log/entity/provider/{provider_id}", headers=headers)
    assert resp.status_code == 200
    tables = {entry["table_name"] for entry in resp.json()}
    assert tables == {"providers", "provider_state_licenses"}

    resp = await client.get(f"/audit-log/entity/agent/{provider_id}", headers=headers)
    assert resp.status_code == 422

    resp = await client.get("/audit-log/entity/provider/bad-id", headers=headers)
    assert resp.status_code == 400
