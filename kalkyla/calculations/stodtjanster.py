"""
Stödtjänster (grid balancing services) income projection.

Emaldo batteries earn a zone-based guaranteed monthly amount for the campaign
period, then an estimated rate per kW. Other batteries earn the per-kW rate
every year.
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext

from kalkyla.calculations.constants import (
    DEFAULT_GRID_SERVICES_RATE,
    DEFAULT_PROJECTION_YEARS,
    EMALDO_CAMPAIGN_MONTHS,
    EMALDO_STODTJANSTER_RATES,
)
from kalkyla.calculations.formulas import D, FINANCIAL_CONTEXT


@dataclass(frozen=True)
class StodtjansterProjection:
    guaranteed_sek: Decimal
    post_campaign_sek: Decimal
    total_sek: Decimal
    annual_average_sek: Decimal


def project_stodtjanster(
    *,
    battery_kw,
    elomrade: str,
    is_emaldo: bool,
    post_campaign_rate_per_kw_year=DEFAULT_GRID_SERVICES_RATE,
    projection_years: int = DEFAULT_PROJECTION_YEARS,
) -> StodtjansterProjection:
    with localcontext(FINANCIAL_CONTEXT):
        annual_rate_income = D(battery_kw) * D(post_campaign_rate_per_kw_year)
        if not is_emaldo:
            total = annual_rate_income * projection_years
            return StodtjansterProjection(Decimal(0), total, total, annual_rate_income)

        campaign_months = min(EMALDO_CAMPAIGN_MONTHS, projection_years * 12)
        guaranteed = EMALDO_STODTJANSTER_RATES[elomrade] * campaign_months
        remaining_years = Decimal(projection_years * 12 - campaign_months) / 12
        post_campaign = annual_rate_income * remaining_years
        total = guaranteed + post_campaign
        return StodtjansterProjection(guaranteed, post_campaign, total, total / projection_years)
