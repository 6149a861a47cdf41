"""
Organization and user administration - role hierarchy and tenant isolation.
"""

import pytest
from httpx import AsyncClient

from kalkyla.db.models.enums import UserRole
from tests.conftest import headers_for, make_user


@pytest.mark.asyncio
async def test_super_admin_creates_org_with_default_natagare(client: AsyncClient, super_admin, super_headers):
    response = await client.post(
        "/api/v1/organizations",
        headers=super_headers,
        json={"name": "Nya Sol AB", "slug": "nya-sol", "primary_color": "#112233"},
    )
    assert response.status_code == 201
    org = response.json()
    assert org["slug"] == "nya-sol"
    assert org["installer_fixed_cut"] is None

    natagare = await client.get("/api/v1/natagare", headers=super_headers, params={"org_id": org["id"]})
    names = {n["name"] for n in natagare.json()}
    assert "Ellevio" in names
    assert all(n["is_default"] for n in natagare.json())


@pytest.mark.asyncio
async def test_duplicate_slug_conflict(client: AsyncClient, super_headers, org):
    response = await client.post(
        "/api/v1/organizations", headers=super_headers, json={"name": "Kopia", "slug": "test-solar"}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_invalid_slug_and_color_rejected(client: AsyncClient, super_headers):
    bad_slug = await client.post("/api/v1/organizations", headers=super_headers, json={"name": "X AB", "slug": "Stora Bokstäver"})
    assert bad_slug.status_code == 422
    bad_color = await client.post(
        "/api/v1/organizations", headers=super_headers, json={"name": "X AB", "slug": "x-ab", "primary_color": "blue"}
    )
    assert bad_color.status_code == 422


@pytest.mark.asyncio
async def test_affiliation_fields_dropped_for_non_affiliated(client: AsyncClient, super_headers):
    response = await client.post(
        "/api/v1/organizations",
        headers=super_headers,
        json={"name": "Fri AB", "slug": "fri-ab", "installer_fixed_cut": 5000, "margin_alert_threshold": 1000},
    )
    assert response.json()["installer_fixed_cut"] is None
    assert response.json()["margin_alert_threshold"] is None


@pytest.mark.asyncio
async def test_org_admin_cannot_create_org_or_list_all(client: AsyncClient, admin_headers):
    create = await client.post("/api/v1/organizations", headers=admin_headers, json={"name": "Egen AB", "slug": "egen"})
    assert create.status_code == 403
    assert (await client.get("/api/v1/organizations", headers=admin_headers)).status_code == 403


@pytest.mark.asyncio
async def test_org_admin_edits_own_branding_not_affiliation(client: AsyncClient, org, admin_headers):
    ok = await client.put(f"/api/v1/organizations/{org.id}", headers=admin_headers, json={"primary_color": "#000000"})
    assert ok.status_code == 200
    assert ok.json()["primary_color"] == "#000000"

    denied = await client.put(
        f"/api/v1/organizations/{org.id}", headers=admin_headers, json={"is_proffskontakt_affiliated": True}
    )
    assert denied.status_code == 403


@pytest.mark.asyncio
async def test_org_admin_cannot_touch_other_org(client: AsyncClient, other_org, admin_headers):
    response = await client.put(f"/api/v1/organizations/{other_org.id}", headers=admin_headers, json={"name": "Kapad"})
    assert response.status_code == 403
    assert (await client.get(f"/api/v1/organizations/{other_org.id}", headers=admin_headers)).status_code == 403


@pytest.mark.asyncio
async def test_unaffiliating_clears_margin_settings(client: AsyncClient, affiliated_org, super_headers):
    response = await client.put(
        f"/api/v1/organizations/{affiliated_org.id}",
        headers=super_headers,
        json={"is_proffskontakt_affiliated": False},
    )
    assert response.status_code == 200
    assert response.json()["installer_fixed_cut"] is None


@pytest.mark.asyncio
async def test_org_detail_lists_users(client: AsyncClient, org, org_admin, closer, admin_headers):
    response = await client.get(f"/api/v1/organizations/{org.id}", headers=admin_headers)
    assert response.status_code == 200
    assert {u["email"] for u in response.json()["users"]} == {org_admin.email, closer.email}


@pytest.mark.asyncio
async def test_org_list_counts_users(client: AsyncClient, org, closer, org_admin, super_headers):
    response = await client.get("/api/v1/organizations", headers=super_headers)
    row = next(o for o in response.json() if o["id"] == org.id)
    assert row["user_count"] == 2


@pytest.mark.asyncio
async def test_org_admin_creates_closer_in_own_org(client: AsyncClient, org, other_org, admin_headers):
    response = await client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={"email": "Ny.Closer@TestSolar.se", "name": "Ny Closer", "password": "Hemligt-123", "org_id": org.id},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "ny.closer@testsolar.se"
    assert response.json()["role"] == "CLOSER"

    elsewhere = await client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={"email": "fel@annansol.se", "name": "Fel Org", "password": "Hemligt-123", "org_id": other_org.id},
    )
    assert elsewhere.status_code == 403


@pytest.mark.asyncio
async def test_org_admin_cannot_create_org_admin(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={"email": "boss@testsolar.se", "name": "Boss", "password": "Hemligt-123", "role": "ORG_ADMIN"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_nobody_creates_super_admin(client: AsyncClient, super_headers, org):
    response = await client.post(
        "/api/v1/users",
        headers=super_headers,
        json={"email": "root@kalkyla.se", "name": "Root", "password": "Hemligt-123", "role": "SUPER_ADMIN", "org_id": org.id},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_duplicate_email_conflict(client: AsyncClient, closer, admin_headers):
    response = await client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={"email": closer.email.upper(), "name": "Dubblett", "password": "Hemligt-123"},
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_closer_cannot_manage_users(client: AsyncClient, closer_headers, org_admin):
    assert (await client.get("/api/v1/users", headers=closer_headers)).status_code == 403
    response = await client.post(f"/api/v1/users/{org_admin.id}/deactivate", headers=closer_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_user_list_is_tenant_scoped(client: AsyncClient, session, org, other_org, closer, admin_headers, super_headers):
    stranger = await make_user(session, "olle@annansol.se", UserRole.CLOSER, other_org)
    own = {u["email"] for u in (await client.get("/api/v1/users", headers=admin_headers)).json()}
    assert closer.email in own
    assert stranger.email not in own

    everyone = {u["email"] for u in (await client.get("/api/v1/users", headers=super_headers)).json()}
    assert stranger.email in everyone


@pytest.mark.asyncio
async def test_org_admin_cannot_see_other_tenant_user(client: AsyncClient, session, other_org, admin_headers):
    stranger = await make_user(session, "olle@annansol.se", UserRole.CLOSER, other_org)
    assert (await client.get(f"/api/v1/users/{stranger.id}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_deactivate_closer(client: AsyncClient, closer, admin_headers):
    response = await client.post(f"/api/v1/users/{closer.id}/deactivate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert (await client.get("/api/v1/auth/me", headers=headers_for(closer))).status_code == 401


@pytest.mark.asyncio
async def test_cannot_deactivate_self(client: AsyncClient, org_admin, admin_headers):
    response = await client.post(f"/api/v1/users/{org_admin.id}/deactivate", headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_super_admin_is_untouchable(client: AsyncClient, super_admin, session, org):
    other_super = await make_user(session, "root2@kalkyla.se", UserRole.SUPER_ADMIN, None)
    headers = headers_for(other_super)
    response = await client.put(f"/api/v1/users/{super_admin.id}", headers=headers, json={"name": "Ändrad"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_role_change_and_short_password_ignored(client: AsyncClient, closer, super_headers):
    old_hash = closer.hashed_password
    response = await client.put(
        f"/api/v1/users/{closer.id}", headers=super_headers, json={"role": "ORG_ADMIN", "password": "kort"}
    )
    assert response.status_code == 200
    assert response.json()["role"] == "ORG_ADMIN"
    assert closer.hashed_password == old_hash
