"""
Battery ROI engine - orchestrates formulas, constraints and stödtjänster.
Challenge: One entry point used by finalize, the public calculator and share views.
Design: Pure function over plain dataclasses; Decimal internally, camelCase float dict out
(the stored and shared JSON shape).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from kalkyla.calculations import formulas as f
from kalkyla.calculations.constants import (
    DEFAULT_AVG_DISCHARGE_PERCENT,
    DEFAULT_CYCLES_PER_DAY,
    DEFAULT_GRID_SERVICES_RATE,
    DEFAULT_PROJECTION_YEARS,
    GRON_TEKNIK_RATE,
    VAT_RATE,
)
from kalkyla.calculations.constraints import (
    calculate_actual_peak_shaving,
    calculate_warranty_life_at_cycles,
)
from kalkyla.calculations.stodtjanster import project_stodtjanster


@dataclass
class BatterySpec:
    capacity_kwh: Decimal
    max_discharge_kw: Decimal
    charge_efficiency: Decimal
    discharge_efficiency: Decimal
    warranty_years: int | None = None
    guaranteed_cycles: int | None = None


@dataclass
class CalculationInputs:
    battery: BatterySpec
    day_price_ore: Decimal
    night_price_ore: Decimal
    effect_tariff_day_rate: Decimal
    total_price_ex_vat: Decimal
    installation_cost: Decimal = Decimal(0)
    effect_tariff_night_rate: Decimal = Decimal(0)
    cycles_per_day: Decimal = DEFAULT_CYCLES_PER_DAY
    avg_discharge_percent: Decimal = DEFAULT_AVG_DISCHARGE_PERCENT
    grid_services_rate_per_kw_year: Decimal = DEFAULT_GRID_SERVICES_RATE
    vat_rate: Decimal = VAT_RATE
    gron_teknik_rate: Decimal = GRON_TEKNIK_RATE
    # Margin (ProffsKontakt affiliates only)
    installer_cut: Decimal | None = None
    battery_cost_price: Decimal | None = None
    # Control parameters
    peak_shaving_percent: Decimal | None = None
    current_peak_kw: Decimal | None = None
    post_campaign_rate_per_kw_year: Decimal | None = None
    elomrade: str | None = None
    is_emaldo_battery: bool = False
    total_projection_years: int = DEFAULT_PROJECTION_YEARS


def calculate_battery_roi(inputs: CalculationInputs) -> dict[str, Any]:
    """Run the full model. Optional result keys are only present when their inputs are."""
    battery = inputs.battery
    results: dict[str, Any] = {}

    effective_capacity = f.calc_effective_capacity(
        battery.capacity_kwh,
        battery.charge_efficiency,
        battery.discharge_efficiency,
        inputs.avg_discharge_percent,
    )
    annual_energy = f.calc_annual_energy(effective_capacity, inputs.cycles_per_day)
    spotpris = f.calc_spotpris_savings(annual_energy, inputs.day_price_ore, inputs.night_price_ore)

    shaved_kw = f.D(battery.max_discharge_kw)
    if inputs.current_peak_kw is not None and inputs.peak_shaving_percent is not None:
        peak = calculate_actual_peak_shaving(
            float(inputs.current_peak_kw),
            float(inputs.peak_shaving_percent),
            float(battery.max_discharge_kw),
        )
        shaved_kw = f.D(peak.actual_kw)
        results["peakShavingKw"] = peak.actual_kw
        results["newPeakKw"] = peak.new_peak_kw
        if peak.constraint_message:
            results["peakShavingConstraint"] = peak.constraint_message
    effect_tariff = f.calc_effect_tariff_savings(shaved_kw, inputs.effect_tariff_day_rate)

    if inputs.elomrade is not None:
        projection = project_stodtjanster(
            battery_kw=battery.max_discharge_kw,
            elomrade=inputs.elomrade,
            is_emaldo=inputs.is_emaldo_battery,
            post_campaign_rate_per_kw_year=(
                inputs.post_campaign_rate_per_kw_year
                if inputs.post_campaign_rate_per_kw_year is not None
                else inputs.grid_services_rate_per_kw_year
            ),
            projection_years=inputs.total_projection_years,
        )
        grid_services = projection.annual_average_sek
        results["stodtjansterGuaranteedSek"] = float(projection.guaranteed_sek)
        results["stodtjansterPostCampaignSek"] = float(projection.post_campaign_sek)
        results["stodtjansterTotalSek"] = float(projection.total_sek)
        results["stodtjansterAnnualAverageSek"] = float(projection.annual_average_sek)
    else:
        grid_services = f.calc_grid_services_income(
            battery.max_discharge_kw, inputs.grid_services_rate_per_kw_year
        )

    total_savings = f.calc_total_annual_savings(spotpris, effect_tariff, grid_services)
    total_inc_vat = f.calc_total_inc_vat(inputs.total_price_ex_vat, inputs.installation_cost, inputs.vat_rate)
    cost_after = f.calc_cost_after_gron_teknik(total_inc_vat, inputs.gron_teknik_rate)

    margin = None
    if inputs.installer_cut is not None and inputs.battery_cost_price is not None:
        margin = f.calc_margin(inputs.total_price_ex_vat, inputs.battery_cost_price, inputs.installer_cut)

    results.update(
        {
            "effectiveCapacityPerCycleKwh": float(effective_capacity),
            "energyFromBatteryPerYearKwh": float(annual_energy),
            "spotprisSavingsSek": float(spotpris),
            "effectTariffSavingsSek": float(effect_tariff),
            "gridServicesIncomeSek": float(grid_services),
            "totalAnnualSavingsSek": float(total_savings),
            "totalIncVatSek": float(total_inc_vat),
            "costAfterGronTeknikSek": float(cost_after),
            "paybackPeriodYears": float(f.calc_payback_period(cost_after, total_savings)),
            "roi10YearPercent": float(f.calc_roi_10_year(cost_after, total_savings)),
            "roi15YearPercent": float(f.calc_roi_15_year(cost_after, total_savings)),
        }
    )
    if margin is not None:
        results["marginSek"] = float(margin)

    if battery.warranty_years and battery.guaranteed_cycles and inputs.cycles_per_day:
        warranty = calculate_warranty_life_at_cycles(
            float(inputs.cycles_per_day), battery.warranty_years, battery.guaranteed_cycles
        )
        results["warrantyYearsAtCycles"] = warranty.years_at_current_cycles
        if warranty.warning_message:
            results["warrantyWarning"] = warranty.warning_message

    return results
