"""
Public calculator endpoints - no login needed.
"""

import pytest
from httpx import AsyncClient

ROI = {
    "capacity_kwh": 10,
    "max_discharge_kw": 5,
    "total_price_ex_vat": 80000,
    "day_price_ore": 150,
    "night_price_ore": 50,
    "effect_tariff_day_rate": 81.25,
}


@pytest.mark.asyncio
async def test_roi_defaults(client: AsyncClient):
    response = await client.post("/api/v1/calculator/roi", json=ROI)
    assert response.status_code == 200
    results = response.json()["results"]
    assert results["effectiveCapacityPerCycleKwh"] == pytest.approx(7.67125)
    assert results["gridServicesIncomeSek"] == pytest.approx(2500)
    assert results["totalAnnualSavingsSek"] == pytest.approx(10175.00625)
    assert results["totalIncVatSek"] == pytest.approx(100000)
    assert results["paybackPeriodYears"] == pytest.approx(51500 / 10175.00625)
    assert "stodtjansterGuaranteedSek" not in results
    assert "marginSek" not in results


@pytest.mark.asyncio
async def test_roi_with_zone_and_peak_constraint(client: AsyncClient):
    payload = {
        **ROI,
        "elomrade": "SE4",
        "is_emaldo_battery": True,
        "current_peak_kw": 12,
        "peak_shaving_percent": 50,
        "warranty_years": 10,
        "guaranteed_cycles": 3000,
        "cycles_per_day": 2,
    }
    results = (await client.post("/api/v1/calculator/roi", json=payload)).json()["results"]
    assert results["peakShavingKw"] == 5
    assert results["newPeakKw"] == 7
    assert "5.0 kW" in results["peakShavingConstraint"]
    assert results["stodtjansterGuaranteedSek"] == pytest.approx(46800)
    assert results["warrantyYearsAtCycles"] == pytest.approx(3000 / 730)
    assert "warrantyWarning" in results


@pytest.mark.asyncio
async def test_roi_validation(client: AsyncClient):
    response = await client.post("/api/v1/calculator/roi", json={**ROI, "capacity_kwh": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "postal_code,zone",
    [("97231", "SE1"), ("85230", "SE2"), ("11122", "SE3"), ("21115", "SE4"), ("123", None)],
)
async def test_elomrade_lookup(client: AsyncClient, postal_code, zone):
    body = (await client.get(f"/api/v1/calculator/elomrade/{postal_code}")).json()
    assert body["elomrade"] == zone
    assert body["valid"] is (zone is not None)


@pytest.mark.asyncio
async def test_elomrade_formats_code(client: AsyncClient):
    body = (await client.get("/api/v1/calculator/elomrade/41104")).json()
    assert body["formatted"] == "411 04"


@pytest.mark.asyncio
async def test_presets(client: AsyncClient):
    presets = (await client.get("/api/v1/calculator/presets")).json()
    assert [p["id"] for p in presets] == ["electric-heating", "heat-pump", "ev-charging", "solar-prosumer"]
    assert all(len(p["hourly_pattern"]) == 24 and len(p["monthly_factors"]) == 12 for p in presets)

    applied = await client.post("/api/v1/calculator/presets/apply", json={"preset_id": "heat-pump", "annual_kwh": 20000})
    body = applied.json()
    assert len(body["data"]) == 12
    assert body["total_kwh"] == pytest.approx(20000)

    default_total = await client.post("/api/v1/calculator/presets/apply", json={"preset_id": "ev-charging"})
    assert default_total.json()["total_kwh"] == pytest.approx(20000)

    missing = await client.post("/api/v1/calculator/presets/apply", json={"preset_id": "pool", "annual_kwh": 20000})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_scale_profile(client: AsyncClient):
    data = [[1.0] * 24 for _ in range(12)]
    body = (await client.post("/api/v1/calculator/profile/scale", json={"data": data, "target_annual_kwh": 4320})).json()
    assert body["total_kwh"] == pytest.approx(4320)
    assert body["data"][0][0] == pytest.approx(0.5)

    bad = await client.post("/api/v1/calculator/profile/scale", json={"data": data[:3], "target_annual_kwh": 100})
    assert bad.status_code == 422
