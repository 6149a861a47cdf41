"""
Battery catalogue and grid operator (nätägare) API tests.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import draft_payload, make_catalogue

CONFIG = {
    "name": "LUNA2000-10",
    "capacity_kwh": 10,
    "max_discharge_kw": 5,
    "max_charge_kw": 5,
    "charge_efficiency": 96,
    "discharge_efficiency": 96,
    "warranty_years": 10,
    "guaranteed_cycles": 6000,
    "degradation_per_year": 2,
    "cost_price": 52000,
}


async def _brand(client: AsyncClient, headers: dict, name: str = "Huawei") -> dict:
    response = await client.post("/api/v1/batteries/brands", headers=headers, json={"name": name})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_brand_and_config_lifecycle(client: AsyncClient, admin_headers):
    brand = await _brand(client, admin_headers)
    response = await client.post("/api/v1/batteries/configs", headers=admin_headers, json={**CONFIG, "brand_id": brand["id"]})
    assert response.status_code == 201
    config = response.json()
    assert config["brand_name"] == "Huawei"
    assert config["capacity_kwh"] == 10
    assert config["is_active"] is True

    brands = (await client.get("/api/v1/batteries/brands", headers=admin_headers)).json()
    assert brands[0]["config_count"] == 1

    updated = await client.put(
        f"/api/v1/batteries/configs/{config['id']}", headers=admin_headers, json={"cost_price": 50000.5}
    )
    assert updated.json()["cost_price"] == 50000.5

    blocked = await client.delete(f"/api/v1/batteries/brands/{brand['id']}", headers=admin_headers)
    assert blocked.status_code == 422
    assert blocked.json()["config_count"] == 1

    assert (await client.delete(f"/api/v1/batteries/configs/{config['id']}", headers=admin_headers)).status_code == 204
    assert (await client.delete(f"/api/v1/batteries/brands/{brand['id']}", headers=admin_headers)).status_code == 204


@pytest.mark.asyncio
async def test_duplicate_brand_and_config_names(client: AsyncClient, admin_headers):
    brand = await _brand(client, admin_headers)
    assert (await client.post("/api/v1/batteries/brands", headers=admin_headers, json={"name": "Huawei"})).status_code == 409
    await client.post("/api/v1/batteries/configs", headers=admin_headers, json={**CONFIG, "brand_id": brand["id"]})
    again = await client.post("/api/v1/batteries/configs", headers=admin_headers, json={**CONFIG, "brand_id": brand["id"]})
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_config_validation(client: AsyncClient, admin_headers):
    brand = await _brand(client, admin_headers)
    response = await client.post(
        "/api/v1/batteries/configs",
        headers=admin_headers,
        json={**CONFIG, "brand_id": brand["id"], "charge_efficiency": 120},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_closer_reads_but_cannot_write(client: AsyncClient, catalogue, closer_headers):
    assert (await client.get("/api/v1/batteries/configs", headers=closer_headers)).status_code == 200
    response = await client.post("/api/v1/batteries/brands", headers=closer_headers, json={"name": "Tesla"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_catalogue_is_tenant_private(client: AsyncClient, session, other_org, admin_headers, super_headers):
    _, foreign = await make_catalogue(session, other_org, brand_name="Sungrow")
    assert (await client.get(f"/api/v1/batteries/configs/{foreign.id}", headers=admin_headers)).status_code == 404
    mine = await client.get("/api/v1/batteries/configs", headers=admin_headers)
    assert foreign.id not in {c["id"] for c in mine.json()}

    cross = await client.get("/api/v1/batteries/configs", headers=admin_headers, params={"org_id": other_org.id})
    assert cross.status_code == 403

    as_super = await client.get(f"/api/v1/batteries/configs/{foreign.id}", headers=super_headers, params={"org_id": other_org.id})
    assert as_super.status_code == 200


@pytest.mark.asyncio
async def test_config_in_use_is_deactivated_not_deleted(client: AsyncClient, catalogue, closer_headers, admin_headers):
    natagare, config = catalogue
    draft = await client.post("/api/v1/calculations/draft", headers=closer_headers, json=draft_payload(natagare, config))
    assert draft.status_code == 200

    response = await client.delete(f"/api/v1/batteries/configs/{config.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"deleted": False, "deactivated": True}
    assert (await client.get(f"/api/v1/batteries/configs/{config.id}", headers=admin_headers)).json()["is_active"] is False


@pytest.mark.asyncio
async def test_filter_configs_by_brand(client: AsyncClient, admin_headers):
    huawei = await _brand(client, admin_headers, "Huawei")
    emaldo = await _brand(client, admin_headers, "Emaldo")
    await client.post("/api/v1/batteries/configs", headers=admin_headers, json={**CONFIG, "brand_id": huawei["id"]})
    await client.post("/api/v1/batteries/configs", headers=admin_headers, json={**CONFIG, "brand_id": emaldo["id"]})
    response = await client.get("/api/v1/batteries/configs", headers=admin_headers, params={"brand_id": emaldo["id"]})
    assert [c["brand_name"] for c in response.json()] == ["Emaldo"]


@pytest.mark.asyncio
async def test_natagare_crud(client: AsyncClient, admin_headers):
    payload = {"name": "Göteborg Energi", "day_rate_sek_kw": 59.5, "night_rate_sek_kw": 0}
    created = await client.post("/api/v1/natagare", headers=admin_headers, json=payload)
    assert created.status_code == 201
    natagare = created.json()
    assert natagare["day_start_hour"] == 6
    assert natagare["day_end_hour"] == 22
    assert natagare["is_default"] is False

    assert (await client.post("/api/v1/natagare", headers=admin_headers, json=payload)).status_code == 409

    updated = await client.put(f"/api/v1/natagare/{natagare['id']}", headers=admin_headers, json={"is_active": False})
    assert updated.json()["is_active"] is False
    active = await client.get("/api/v1/natagare", headers=admin_headers, params={"active_only": True})
    assert natagare["id"] not in {n["id"] for n in active.json()}

    assert (await client.delete(f"/api/v1/natagare/{natagare['id']}", headers=admin_headers)).status_code == 204


@pytest.mark.asyncio
async def test_default_and_used_natagare_are_protected(client: AsyncClient, session, org, catalogue, closer_headers, admin_headers):
    natagare, config = catalogue
    natagare.is_default = True
    await session.flush()
    assert (await client.delete(f"/api/v1/natagare/{natagare.id}", headers=admin_headers)).status_code == 422

    natagare.is_default = False
    await session.flush()
    await client.post("/api/v1/calculations/draft", headers=closer_headers, json=draft_payload(natagare, config))
    response = await client.delete(f"/api/v1/natagare/{natagare.id}", headers=admin_headers)
    assert response.status_code == 422
