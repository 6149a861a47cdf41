"""
Dashboard API tests - the same page, scoped per role.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import draft_payload, headers_for


@pytest.fixture
def seed_drafts(client: AsyncClient, catalogue, closer_headers, other_closer):
    natagare, config = catalogue

    async def create():
        mine = await client.post("/api/v1/calculations/draft", headers=closer_headers, json=draft_payload(natagare, config))
        theirs = await client.post(
            "/api/v1/calculations/draft", headers=headers_for(other_closer), json=draft_payload(natagare, config)
        )
        return mine.json(), theirs.json()

    return create


@pytest.mark.asyncio
async def test_stats_scoped_by_role(client: AsyncClient, seed_drafts, closer_headers, admin_headers, super_headers):
    mine, theirs = await seed_drafts()

    as_closer = (await client.get("/api/v1/dashboard/stats", headers=closer_headers)).json()
    assert as_closer["total_calculations"] == 1
    assert [c["id"] for c in as_closer["recent_calculations"]] == [mine["id"]]

    as_admin = (await client.get("/api/v1/dashboard/stats", headers=admin_headers)).json()
    assert as_admin["total_calculations"] == 2

    as_super = (await client.get("/api/v1/dashboard/stats", headers=super_headers)).json()
    assert as_super["total_calculations"] == 2
    assert as_super["total_views"] == 0


@pytest.mark.asyncio
async def test_stats_count_views(client: AsyncClient, seed_drafts, closer_headers):
    mine, _ = await seed_drafts()
    link = (await client.post(f"/api/v1/calculations/{mine['id']}/share", headers=closer_headers, json={})).json()
    await client.get(f"/api/v1/public/test-solar/{link['share_code']}")
    await client.get(f"/api/v1/public/test-solar/{link['share_code']}")

    stats = (await client.get("/api/v1/dashboard/stats", headers=closer_headers)).json()
    assert stats["total_views"] == 2
    assert stats["recent_calculations"][0]["view_count"] == 2


@pytest.mark.asyncio
async def test_archived_calculations_not_counted(client: AsyncClient, seed_drafts, closer_headers):
    mine, _ = await seed_drafts()
    await client.delete(f"/api/v1/calculations/{mine['id']}", headers=closer_headers)
    stats = (await client.get("/api/v1/dashboard/stats", headers=closer_headers)).json()
    assert stats["total_calculations"] == 0
    assert stats["recent_calculations"] == []


@pytest.mark.asyncio
async def test_organization_overview(client: AsyncClient, seed_drafts, org, other_org, org_admin, super_headers, admin_headers):
    await seed_drafts()
    response = await client.get("/api/v1/dashboard/organizations", headers=super_headers)
    assert response.status_code == 200
    rows = {row["slug"]: row for row in response.json()}
    assert rows["test-solar"]["calculation_count"] == 2
    # org admin and both closers
    assert rows["test-solar"]["active_user_count"] == 3
    assert rows["annan-sol"]["calculation_count"] == 0

    assert (await client.get("/api/v1/dashboard/organizations", headers=admin_headers)).status_code == 403


@pytest.mark.asyncio
async def test_all_calculations_filters(client: AsyncClient, seed_drafts, closer, org, other_org, super_headers, admin_headers):
    mine, theirs = await seed_drafts()

    everything = (await client.get("/api/v1/dashboard/calculations", headers=super_headers)).json()
    assert {c["id"] for c in everything} == {mine["id"], theirs["id"]}

    by_closer = await client.get("/api/v1/dashboard/calculations", headers=super_headers, params={"closer_id": closer.id})
    assert [c["id"] for c in by_closer.json()] == [mine["id"]]

    by_org = await client.get("/api/v1/dashboard/calculations", headers=super_headers, params={"org_id": other_org.id})
    assert by_org.json() == []

    assert (await client.get("/api/v1/dashboard/calculations", headers=admin_headers)).status_code == 403
