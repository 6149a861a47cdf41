"""
Share links and the public (prospect) view.
"""

from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient

from kalkyla.core.timeutils import utcnow
from kalkyla.db.models.enums import UserRole
from tests.conftest import FINALIZE_PRICES, draft_payload, flat_profile, headers_for, make_catalogue, make_user


@pytest_asyncio.fixture
async def finalized(client: AsyncClient, catalogue, closer_headers) -> dict:
    natagare, config = catalogue
    draft = await client.post("/api/v1/calculations/draft", headers=closer_headers, json=draft_payload(natagare, config))
    calc_id = draft.json()["id"]
    response = await client.post(f"/api/v1/calculations/{calc_id}/finalize", headers=closer_headers, json=FINALIZE_PRICES)
    return response.json()


async def _share(client: AsyncClient, headers: dict, calc_id: int, **settings) -> dict:
    response = await client.post(f"/api/v1/calculations/{calc_id}/share", headers=headers, json=settings)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_public_view_hides_margin(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"], custom_greeting="Hej Svensson!")
    assert len(link["share_code"]) == 21
    assert link["share_url"].endswith(f"/test-solar/{link['share_code']}")

    response = await client.get(f"/api/v1/public/test-solar/{link['share_code']}")
    assert response.status_code == 200
    body = response.json()
    results = body["calculation"]["results"]

    assert body["closer_name"] == "Carl Closer"
    assert body["organization"]["slug"] == "test-solar"
    assert body["calculation"]["custom_greeting"] == "Hej Svensson!"
    assert results["totalPriceIncVat"] == pytest.approx(100000)
    assert results["spotprisSavings"] == pytest.approx(2800.00625)
    assert results["breakdown"]["spotpris"]["spreadOre"] == 100
    assert results["breakdown"]["stodtjanster"]["isEmaldoBattery"] is True
    assert results["breakdown"]["stodtjanster"]["guaranteedMonthlySek"] == pytest.approx(1300)
    assert "marginSek" not in results

    [battery] = body["calculation"]["batteries"]
    assert battery["total_price_inc_vat"] == pytest.approx(100000)
    assert battery["cost_after_gron_teknik"] == pytest.approx(51500)
    assert "cost_price" not in battery


@pytest.mark.asyncio
async def test_affiliate_margin_never_public(client: AsyncClient, session, affiliated_org):
    natagare, config = await make_catalogue(session, affiliated_org)
    headers = headers_for(await make_user(session, "sara@proffs.se", UserRole.CLOSER, affiliated_org))
    draft = await client.post("/api/v1/calculations/draft", headers=headers, json=draft_payload(natagare, config))
    calc_id = draft.json()["id"]
    finalized = await client.post(f"/api/v1/calculations/{calc_id}/finalize", headers=headers, json=FINALIZE_PRICES)
    assert "marginSek" in finalized.json()["results"]

    link = await _share(client, headers, calc_id)
    response = await client.get(f"/api/v1/public/proffs-partner/{link['share_code']}")
    assert "marginSek" not in response.json()["calculation"]["results"]


@pytest.mark.asyncio
async def test_wrong_org_slug_is_not_found(client: AsyncClient, finalized, closer_headers, other_org):
    link = await _share(client, closer_headers, finalized["id"])
    response = await client.get(f"/api/v1/public/annan-sol/{link['share_code']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_password_protected_link(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"], password="villa-2026")
    url = f"/api/v1/public/test-solar/{link['share_code']}"

    locked = await client.get(url)
    assert locked.status_code == 401
    assert locked.json()["password_required"] is True

    wrong = await client.post(url, json={"password": "gissning"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Fel lösenord"

    unlocked = await client.post(url, json={"password": "villa-2026"})
    assert unlocked.status_code == 200


@pytest.mark.asyncio
async def test_share_password_rate_limited(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"], password="villa-2026")
    url = f"/api/v1/public/test-solar/{link['share_code']}"
    for _ in range(5):
        assert (await client.post(url, json={"password": "gissning"})).status_code == 401

    blocked = await client.post(url, json={"password": "villa-2026"})
    assert blocked.status_code == 429


@pytest.mark.asyncio
async def test_removing_password(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"], password="villa-2026")
    await _share(client, closer_headers, finalized["id"], password="")
    assert (await client.get(f"/api/v1/public/test-solar/{link['share_code']}")).status_code == 200


@pytest.mark.asyncio
async def test_expired_link(client: AsyncClient, finalized, closer_headers):
    expired_at = (utcnow() - timedelta(days=1)).isoformat()
    link = await _share(client, closer_headers, finalized["id"], expires_at=expired_at)
    response = await client.get(f"/api/v1/public/test-solar/{link['share_code']}")
    assert response.status_code == 404
    assert response.json()["expired"] is True


@pytest.mark.asyncio
async def test_deactivate_and_regenerate(client: AsyncClient, finalized, closer_headers):
    calc_id = finalized["id"]
    link = await _share(client, closer_headers, calc_id)
    old_url = f"/api/v1/public/test-solar/{link['share_code']}"

    assert (await client.post(f"/api/v1/calculations/{calc_id}/share/deactivate", headers=closer_headers)).status_code == 200
    assert (await client.get(old_url)).status_code == 404

    # Reactivating keeps the code
    again = await _share(client, closer_headers, calc_id)
    assert again["share_code"] == link["share_code"]

    regenerated = await client.post(f"/api/v1/calculations/{calc_id}/share/regenerate", headers=closer_headers)
    new_code = regenerated.json()["share_code"]
    assert new_code != link["share_code"]
    assert (await client.get(old_url)).status_code == 404
    assert (await client.get(f"/api/v1/public/test-solar/{new_code}")).status_code == 200


@pytest.mark.asyncio
async def test_archived_calculation_link_stops_working(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"])
    await client.delete(f"/api/v1/calculations/{finalized['id']}", headers=closer_headers)
    assert (await client.get(f"/api/v1/public/test-solar/{link['share_code']}")).status_code == 404


@pytest.mark.asyncio
async def test_views_are_counted(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"])
    for _ in range(3):
        await client.get(f"/api/v1/public/test-solar/{link['share_code']}", headers={"User-Agent": "Safari"})

    stats = await client.get(f"/api/v1/calculations/{finalized['id']}/views", headers=closer_headers)
    assert stats.json()["total_views"] == 3
    assert stats.json()["last_viewed_at"] is not None

    [item] = (await client.get("/api/v1/calculations", headers=closer_headers)).json()
    assert item["view_count"] == 3


@pytest.mark.asyncio
async def test_other_closer_cannot_share(client: AsyncClient, finalized, other_closer):
    response = await client.post(f"/api/v1/calculations/{finalized['id']}/share", headers=headers_for(other_closer), json={})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_prospect_saves_variant(client: AsyncClient, finalized, closer_headers):
    link = await _share(client, closer_headers, finalized["id"])
    payload = {
        "name": "Med elbil",
        "consumption_profile": flat_profile(3.0),
        "annual_consumption_kwh": 25920,
        "results": {"totalAnnualSavings": 15000},
    }
    response = await client.post(f"/api/v1/public/test-solar/{link['share_code']}/variants", json=payload)
    assert response.status_code == 201
    assert response.json()["calculation_id"] == finalized["id"]
    assert response.json()["name"] == "Med elbil"

    missing = await client.post("/api/v1/public/test-solar/finns-inte/variants", json=payload)
    assert missing.status_code == 404
