"""
Individual ROI formulas.
Challenge: Money math without float drift.
Design: Decimal in, Decimal out; a local context fixes precision and rounding for every formula.
"""

from decimal import ROUND_HALF_UP, Context, Decimal, localcontext

from kalkyla.calculations.constants import DAYS_PER_YEAR, PAYBACK_NEVER

FINANCIAL_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)

HUNDRED = Decimal(100)


def D(value) -> Decimal:
    """Coerce int/float/str/Decimal to Decimal via str() so floats keep their printed value."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calc_effective_capacity(capacity_kwh, charge_efficiency, discharge_efficiency, avg_discharge_percent) -> Decimal:
    """Usable kWh per cycle after charge/discharge losses and depth of discharge (percent inputs)."""
    with localcontext(FINANCIAL_CONTEXT):
        return (
            D(capacity_kwh)
            * (D(charge_efficiency) / HUNDRED)
            * (D(discharge_efficiency) / HUNDRED)
            * (D(avg_discharge_percent) / HUNDRED)
        )


def calc_annual_energy(effective_capacity_kwh: Decimal, cycles_per_day) -> Decimal:
    with localcontext(FINANCIAL_CONTEXT):
        return D(effective_capacity_kwh) * D(cycles_per_day) * DAYS_PER_YEAR


def calc_spotpris_savings(annual_energy_kwh: Decimal, day_price_ore, night_price_ore) -> Decimal:
    """Arbitrage: charge at night, discharge at day. Prices in öre/kWh, result in SEK."""
    with localcontext(FINANCIAL_CONTEXT):
        return D(annual_energy_kwh) * (D(day_price_ore) - D(night_price_ore)) / HUNDRED


def calc_spotpris_savings_v2(
    capacity_kwh, cycles_per_day, efficiency, day_price_ore, night_price_ore, days_per_year=DAYS_PER_YEAR
) -> Decimal:
    """Direct formula: spread x round-trip efficiency (fraction) x cycles x capacity x days."""
    with localcontext(FINANCIAL_CONTEXT):
        spread = D(day_price_ore) - D(night_price_ore)
        return spread * D(efficiency) * D(cycles_per_day) * D(capacity_kwh) * D(days_per_year) / HUNDRED


def calc_effect_tariff_savings(shaved_kw, effect_tariff_day_rate) -> Decimal:
    """Monthly peak reduction priced at the grid operator's day rate, for 12 months."""
    with localcontext(FINANCIAL_CONTEXT):
        return D(shaved_kw) * D(effect_tariff_day_rate) * 12


def calc_grid_services_income(max_discharge_kw, rate_per_kw_year) -> Decimal:
    with localcontext(FINANCIAL_CONTEXT):
        return D(max_discharge_kw) * D(rate_per_kw_year)


def calc_total_annual_savings(spotpris: Decimal, effect_tariff: Decimal, grid_services: Decimal) -> Decimal:
    with localcontext(FINANCIAL_CONTEXT):
        return spotpris + effect_tariff + grid_services


def calc_total_inc_vat(total_price_ex_vat, installation_cost, vat_rate) -> Decimal:
    with localcontext(FINANCIAL_CONTEXT):
        return (D(total_price_ex_vat) + D(installation_cost)) * (1 + D(vat_rate))


def calc_cost_after_gron_teknik(total_inc_vat: Decimal, gron_teknik_rate) -> Decimal:
    """Grön teknik tax deduction is taken off the VAT-inclusive price."""
    with localcontext(FINANCIAL_CONTEXT):
        return total_inc_vat - total_inc_vat * D(gron_teknik_rate)


def calc_margin(total_price_ex_vat, battery_cost_price, installer_cut) -> Decimal:
    with localcontext(FINANCIAL_CONTEXT):
        return D(total_price_ex_vat) - D(battery_cost_price) - D(installer_cut)


def calc_payback_period(cost_after_gron_teknik: Decimal, annual_savings: Decimal) -> Decimal:
    if annual_savings.is_zero():
        return PAYBACK_NEVER
    with localcontext(FINANCIAL_CONTEXT):
        return cost_after_gron_teknik / annual_savings


def calc_roi(cost_after_gron_teknik: Decimal, annual_savings: Decimal, years: int) -> Decimal:
    """Percent return over `years` of savings; 0 when there is no cost."""
    if cost_after_gron_teknik.is_zero():
        return Decimal(0)
    with localcontext(FINANCIAL_CONTEXT):
        return (annual_savings * years - cost_after_gron_teknik) / cost_after_gron_teknik * HUNDRED


def calc_roi_10_year(cost_after_gron_teknik: Decimal, annual_savings: Decimal) -> Decimal:
    return calc_roi(cost_after_gron_teknik, annual_savings, 10)


def calc_roi_15_year(cost_after_gron_teknik: Decimal, annual_savings: Decimal) -> Decimal:
    return calc_roi(cost_after_gron_teknik, annual_savings, 15)
