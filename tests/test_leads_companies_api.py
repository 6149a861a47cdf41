"""
Lead marketplace - public submission, company matching and super admin handling.
"""

import pytest
from httpx import AsyncClient

from kalkyla.integrations import n8n

LEAD = {
    "name": "Eva Ek",
    "email": "eva@example.se",
    "phone": "070-1234567",
    "property_type": "VILLA",
    "postal_code": "11122",
    "elomrade": "SE3",
    "annual_kwh": 18000,
    "interest_type": "BATTERY",
    "budget": "RANGE_100K_200K",
    "timeline": "WITHIN_3_MONTHS",
    "source": "landing-page",
}


async def _company(client: AsyncClient, headers: dict, name: str, **fields) -> dict:
    payload = {"name": name, "email": f"{name.lower().replace(' ', '')}@installator.se", **fields}
    response = await client.post("/api/v1/companies", headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_company_crud(client: AsyncClient, super_headers):
    company = await _company(client, super_headers, "Sol Montage", webhook_url="")
    assert company["is_active"] is True
    assert company["webhook_url"] is None
    assert company["max_leads_per_day"] == 10

    updated = await client.put(
        f"/api/v1/companies/{company['id']}", headers=super_headers, json={"max_leads_per_day": 3, "accepts_solar": True}
    )
    assert updated.json()["max_leads_per_day"] == 3
    assert updated.json()["accepts_solar"] is True

    toggled = await client.post(f"/api/v1/companies/{company['id']}/toggle", headers=super_headers)
    assert toggled.json()["is_active"] is False

    assert (await client.delete(f"/api/v1/companies/{company['id']}", headers=super_headers)).status_code == 204
    assert (await client.get("/api/v1/companies", headers=super_headers)).json() == []
    assert (await client.delete(f"/api/v1/companies/{company['id']}", headers=super_headers)).status_code == 404


@pytest.mark.asyncio
async def test_companies_are_super_admin_only(client: AsyncClient, admin_headers):
    assert (await client.get("/api/v1/companies", headers=admin_headers)).status_code == 403
    response = await client.post("/api/v1/companies", headers=admin_headers, json={"name": "X AB", "email": "x@x.se"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_lead_matches_and_notifies(client: AsyncClient, super_headers, webhooks):
    plain = await _company(client, super_headers, "Batteri Direkt")
    hooked = await _company(client, super_headers, "Hook Energi", webhook_url="https://hook.example/leads")
    await _company(client, super_headers, "Bara Sol", accepts_battery=False, accepts_solar=True)

    response = await client.post("/api/v1/leads", json=LEAD)
    assert response.status_code == 201
    assert response.json()["matched_companies"] == 2

    notified = [payload["companyName"] for kind, payload in webhooks if kind == n8n.LEAD_NOTIFICATION]
    assert sorted(notified) == ["Batteri Direkt", "Hook Energi"]
    [(url, body)] = [(kind, payload) for kind, payload in webhooks if kind.startswith("https://")]
    assert url == "https://hook.example/leads"
    assert body["event"] == "new_lead"
    assert body["lead"]["email"] == "eva@example.se"

    [lead] = (await client.get("/api/v1/leads", headers=super_headers)).json()
    assert lead["status"] == "MATCHED"
    methods = {m["company_id"]: m["notification_method"] for m in lead["matches"]}
    assert methods == {plain["id"]: "EMAIL", hooked["id"]: "EMAIL,WEBHOOK"}

    companies = {c["id"]: c for c in (await client.get("/api/v1/companies", headers=super_headers)).json()}
    assert companies[plain["id"]]["leads_today"] == 1
    assert companies[plain["id"]]["match_count"] == 1


@pytest.mark.asyncio
async def test_lead_without_matches_stays_new(client: AsyncClient, super_headers, webhooks):
    response = await client.post("/api/v1/leads", json={**LEAD, "interest_type": "SOLAR"})
    assert response.json()["matched_companies"] == 0
    assert webhooks == []
    [lead] = (await client.get("/api/v1/leads", headers=super_headers)).json()
    assert lead["status"] == "NEW"


@pytest.mark.asyncio
async def test_at_most_six_matches(client: AsyncClient, super_headers, webhooks):
    for i in range(8):
        await _company(client, super_headers, f"Installator {i}")
    response = await client.post("/api/v1/leads", json=LEAD)
    assert response.json()["matched_companies"] == 6


@pytest.mark.asyncio
async def test_daily_cap_and_inactive_companies(client: AsyncClient, super_headers, webhooks):
    capped = await _company(client, super_headers, "Liten Firma", max_leads_per_day=1)
    paused = await _company(client, super_headers, "Pausad AB")
    await client.post(f"/api/v1/companies/{paused['id']}/toggle", headers=super_headers)

    first = await client.post("/api/v1/leads", json=LEAD)
    assert first.json()["matched_companies"] == 1
    second = await client.post("/api/v1/leads", json={**LEAD, "email": "per@example.se"})
    assert second.json()["matched_companies"] == 0

    companies = {c["id"]: c for c in (await client.get("/api/v1/companies", headers=super_headers)).json()}
    assert companies[capped["id"]]["leads_today"] == 1
    assert companies[paused["id"]]["leads_today"] == 0


@pytest.mark.asyncio
async def test_both_interest_matches_either(client: AsyncClient, super_headers, webhooks):
    await _company(client, super_headers, "Bara Sol", accepts_battery=False, accepts_solar=True)
    response = await client.post("/api/v1/leads", json={**LEAD, "interest_type": "BOTH"})
    assert response.json()["matched_companies"] == 1


@pytest.mark.asyncio
async def test_lead_validation(client: AsyncClient):
    response = await client.post("/api/v1/leads", json={**LEAD, "email": "inte-en-adress"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_lead_filters_and_status(client: AsyncClient, super_headers, admin_headers, webhooks):
    await client.post("/api/v1/leads", json=LEAD)
    await client.post("/api/v1/leads", json={**LEAD, "email": "norr@example.se", "elomrade": "SE1", "postal_code": "97231"})

    se1 = (await client.get("/api/v1/leads", headers=super_headers, params={"elomrade": "SE1"})).json()
    assert [lead["email"] for lead in se1] == ["norr@example.se"]

    patched = await client.patch(f"/api/v1/leads/{se1[0]['id']}/status", headers=super_headers, json={"status": "CONTACTED"})
    assert patched.json()["status"] == "CONTACTED"

    contacted = (await client.get("/api/v1/leads", headers=super_headers, params={"status": "CONTACTED"})).json()
    assert len(contacted) == 1

    assert (await client.get("/api/v1/leads", headers=admin_headers)).status_code == 403
    missing = await client.patch("/api/v1/leads/9999/status", headers=super_headers, json={"status": "CLOSED"})
    assert missing.status_code == 404
