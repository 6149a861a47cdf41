"""
ROI engine, physical constraints and stödtjänster projection.
"""

from decimal import Decimal

import pytest

from kalkyla.calculations import CalculationInputs, calculate_battery_roi
from kalkyla.calculations.constraints import calculate_actual_peak_shaving, calculate_warranty_life_at_cycles
from kalkyla.calculations.engine import BatterySpec
from kalkyla.calculations.stodtjanster import project_stodtjanster


def _inputs(**overrides) -> CalculationInputs:
    values = dict(
        battery=BatterySpec(
            capacity_kwh=Decimal(10),
            max_discharge_kw=Decimal(5),
            charge_efficiency=Decimal(95),
            discharge_efficiency=Decimal(95),
            warranty_years=10,
            guaranteed_cycles=6000,
        ),
        day_price_ore=Decimal(150),
        night_price_ore=Decimal(50),
        effect_tariff_day_rate=Decimal("81.25"),
        total_price_ex_vat=Decimal(80000),
    )
    values.update(overrides)
    return CalculationInputs(**values)


def test_engine_without_zone_uses_flat_grid_rate():
    results = calculate_battery_roi(_inputs())
    assert results["gridServicesIncomeSek"] == pytest.approx(2500)
    assert results["totalAnnualSavingsSek"] == pytest.approx(10175.00625)
    assert results["costAfterGronTeknikSek"] == pytest.approx(51500)
    assert results["warrantyYearsAtCycles"] == pytest.approx(6000 / 365)
    assert "warrantyWarning" not in results
    assert "marginSek" not in results
    assert "peakShavingKw" not in results


def test_engine_emaldo_in_se3():
    results = calculate_battery_roi(_inputs(elomrade="SE3", is_emaldo_battery=True))
    assert results["stodtjansterGuaranteedSek"] == pytest.approx(46800)
    assert results["stodtjansterPostCampaignSek"] == pytest.approx(17500)
    assert results["gridServicesIncomeSek"] == pytest.approx(6430)
    assert results["totalAnnualSavingsSek"] == pytest.approx(14105.00625)


def test_engine_margin_needs_both_inputs():
    assert "marginSek" not in calculate_battery_roi(_inputs(installer_cut=Decimal(15000)))
    results = calculate_battery_roi(_inputs(installer_cut=Decimal(15000), battery_cost_price=Decimal(40000)))
    assert results["marginSek"] == 25000


def test_engine_peak_shaving_limited_by_discharge():
    results = calculate_battery_roi(_inputs(current_peak_kw=Decimal(12), peak_shaving_percent=Decimal(50)))
    assert results["peakShavingKw"] == 5
    assert results["effectTariffSavingsSek"] == pytest.approx(4875)
    assert "peakShavingConstraint" in results


def test_engine_zero_savings_never_pays_back():
    results = calculate_battery_roi(
        _inputs(
            day_price_ore=Decimal(50),
            effect_tariff_day_rate=Decimal(0),
            grid_services_rate_per_kw_year=Decimal(0),
        )
    )
    assert results["totalAnnualSavingsSek"] == 0
    assert results["paybackPeriodYears"] == 999


def test_peak_shaving_unconstrained():
    result = calculate_actual_peak_shaving(8, 50, 5)
    assert result.actual_kw == 4
    assert result.new_peak_kw == 4
    assert result.is_constrained is False
    assert result.constraint_message is None


def test_warranty_warning_when_cycles_run_out():
    result = calculate_warranty_life_at_cycles(2, 10, 6000)
    assert result.years_at_current_cycles == pytest.approx(8.219, rel=1e-3)
    assert result.exceeds_warranty is True
    assert "8.2" in result.warning_message


def test_stodtjanster_non_emaldo_is_flat():
    projection = project_stodtjanster(battery_kw=5, elomrade="SE1", is_emaldo=False)
    assert projection.guaranteed_sek == 0
    assert projection.annual_average_sek == Decimal(2500)
    assert projection.total_sek == Decimal(25000)


def test_stodtjanster_short_projection_caps_campaign():
    projection = project_stodtjanster(battery_kw=5, elomrade="SE1", is_emaldo=True, projection_years=2)
    assert projection.guaranteed_sek == Decimal(1100 * 24)
    assert projection.post_campaign_sek == 0
