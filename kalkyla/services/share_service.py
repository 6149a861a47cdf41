"""
Share service - public links to a finalized calculation.
Challenge: Anonymous prospects see the quote without leaking margins or cost prices,
and protected links must resist password guessing.
Design: Closer-side management reuses the calculation access check; the public read path
projects stored results onto an explicit allow-list and rate limits password attempts per hashed IP.
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from kalkyla.calculations.constants import (
    DEFAULT_GRID_SERVICES_RATE,
    DEFAULT_PEAK_SHAVING_PERCENT,
    EMALDO_CAMPAIGN_MONTHS,
    GRON_TEKNIK_RATE,
    VAT_RATE,
)
from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import AuthenticationError, NotFoundError, RateLimitedError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.core.rate_limit import check_share_password_rate_limit
from kalkyla.core.security import generate_share_code, hash_ip, hash_password, verify_password
from kalkyla.core.timeutils import as_utc, utcnow
from kalkyla.db.models.calculation import Calculation, CalculationBattery, CalculationVariant, CalculationView
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.schemas.share import (
    PublicBattery,
    PublicCalculation,
    PublicCalculationResponse,
    PublicNatagare,
    PublicOrganization,
    ShareLinkResponse,
    ShareLinkSettings,
    VariantCreate,
    VariantResponse,
    ViewStats,
)
from kalkyla.services.calculation_service import CalculationService, share_url

logger = logging.getLogger(__name__)

USER_AGENT_MAX_LENGTH = 500
DEFAULT_CLOSER_NAME = "Din säljare"
HOURS_PER_YEAR = 8760
CAMPAIGN_YEARS = 3
POST_CAMPAIGN_YEARS = 7

# Stored result key -> public key. Anything not listed (marginSek etc.) stays private.
PUBLIC_RESULT_KEYS = {
    "effectiveCapacityPerCycleKwh": "effectiveCapacityKwh",
    "energyFromBatteryPerYearKwh": "annualEnergyKwh",
    "spotprisSavingsSek": "spotprisSavings",
    "effectTariffSavingsSek": "effectTariffSavings",
    "gridServicesIncomeSek": "gridServicesIncome",
    "totalAnnualSavingsSek": "totalAnnualSavings",
    "paybackPeriodYears": "paybackYears",
    "roi10YearPercent": "roi10Year",
    "roi15YearPercent": "roi15Year",
}


def public_battery(line: CalculationBattery) -> PublicBattery:
    config = line.battery_config
    ex_vat = float(line.total_price_ex_vat)
    inc_vat = ex_vat * (1 + float(VAT_RATE))
    return PublicBattery(
        name=config.name,
        brand_name=config.brand_name,
        brand_logo_url=config.brand.logo_url if config.brand else None,
        capacity_kwh=float(config.capacity_kwh),
        max_discharge_kw=float(config.max_discharge_kw),
        max_charge_kw=float(config.max_charge_kw),
        charge_efficiency=float(config.charge_efficiency),
        discharge_efficiency=float(config.discharge_efficiency),
        warranty_years=config.warranty_years,
        guaranteed_cycles=config.guaranteed_cycles,
        degradation_per_year=float(config.degradation_per_year),
        total_price_ex_vat=ex_vat,
        total_price_inc_vat=inc_vat,
        cost_after_gron_teknik=inc_vat * (1 - float(GRON_TEKNIK_RATE)),
    )


def build_breakdown(calc: Calculation, results: dict[str, Any]) -> dict[str, Any]:
    """How each savings line was derived, for prospects who want to check the numbers."""
    config = calc.batteries[0].battery_config
    current_peak = results.get("currentPeakKw", float(calc.annual_consumption_kwh) / HOURS_PER_YEAR)
    peak_percent = results.get("peakShavingPercent", DEFAULT_PEAK_SHAVING_PERCENT)
    target_shaving = current_peak * peak_percent / 100
    actual_shaving = results.get("peakShavingKw", 0)
    guaranteed = results.get("stodtjansterGuaranteedSek")
    post_campaign = results.get("stodtjansterPostCampaignSek")

    return {
        "spotpris": {
            "capacityKwh": float(config.capacity_kwh),
            "cyclesPerDay": results.get("cyclesPerDay", 1),
            "efficiency": float(config.charge_efficiency) * float(config.discharge_efficiency),
            "spreadOre": results.get("spreadOre", 100),
            "annualSavingsSek": results.get("spotprisSavingsSek", 0),
        },
        "effekt": {
            "currentPeakKw": current_peak,
            "peakShavingPercent": peak_percent,
            "actualPeakShavingKw": actual_shaving,
            "newPeakKw": current_peak - actual_shaving,
            "tariffRateSekKw": float(calc.natagare.day_rate_sek_kw),
            "annualSavingsSek": results.get("effectTariffSavingsSek", 0),
            # 1% tolerance for rounding
            "isConstrained": actual_shaving < target_shaving * 0.99,
        },
        "stodtjanster": {
            "elomrade": calc.elomrade.value,
            "isEmaldoBattery": config.is_emaldo,
            "batteryCapacityKw": float(config.max_discharge_kw),
            "guaranteedMonthlySek": guaranteed / EMALDO_CAMPAIGN_MONTHS if config.is_emaldo and guaranteed else None,
            "guaranteedAnnualSek": guaranteed / CAMPAIGN_YEARS if config.is_emaldo and guaranteed else None,
            "postCampaignRatePerKwYear": results.get("postCampaignRatePerKwYear", float(DEFAULT_GRID_SERVICES_RATE)),
            "postCampaignAnnualSek": post_campaign / POST_CAMPAIGN_YEARS if post_campaign else None,
            "displayedAnnualSek": results.get("gridServicesIncomeSek", 0),
        },
    }


def public_results(calc: Calculation, batteries: list[PublicBattery]) -> dict[str, Any] | None:
    if not calc.results:
        return None
    r = calc.results
    first = batteries[0] if batteries else None
    public: dict[str, Any] = {
        "totalPriceExVat": r.get("totalPriceExVat", first.total_price_ex_vat if first else None),
        "totalPriceIncVat": r.get("totalIncVatSek", first.total_price_inc_vat if first else None),
        "costAfterGronTeknik": r.get("costAfterGronTeknikSek", first.cost_after_gron_teknik if first else None),
    }
    for key, public_key in PUBLIC_RESULT_KEYS.items():
        public[public_key] = r.get(key)
    if calc.batteries:
        public["breakdown"] = build_breakdown(calc, r)
    return public


class ShareService:
    def __init__(self, calc_repo: CalculationRepository, calculation_service: CalculationService):
        self.calc_repo = calc_repo
        self.calculations = calculation_service

    # Closer side

    async def generate(self, actor: Principal, calculation_id: int, data: ShareLinkSettings) -> ShareLinkResponse:
        """Create the link or update its settings; reactivates a deactivated link."""
        require_permission(actor.role, Permission.CALCULATION_EDIT)
        calc = await self.calculations.get_accessible(actor, calculation_id)

        calc.share_code = calc.share_code or generate_share_code()
        if data.password is not None:
            calc.share_password_hash = hash_password(data.password) if data.password else None
        if "expires_at" in data.model_fields_set:
            calc.share_expires_at = data.expires_at
        if "custom_greeting" in data.model_fields_set:
            calc.custom_greeting = data.custom_greeting
        calc.share_created_at = calc.share_created_at or utcnow()
        calc.share_is_active = True
        calc = await self.calc_repo.save(calc)

        logger.info("Share link active for calculation %s", calc.id)
        return ShareLinkResponse(share_code=calc.share_code, share_url=share_url(calc.organization.slug, calc.share_code))

    async def deactivate(self, actor: Principal, calculation_id: int) -> None:
        """Hide the link; generate() reactivates it with the same code."""
        require_permission(actor.role, Permission.CALCULATION_EDIT)
        calc = await self.calculations.get_accessible(actor, calculation_id)
        calc.share_is_active = False
        await self.calc_repo.save(calc)

    async def regenerate(self, actor: Principal, calculation_id: int) -> ShareLinkResponse:
        """New code, old URL stops working. Password and expiry are kept."""
        require_permission(actor.role, Permission.CALCULATION_EDIT)
        calc = await self.calculations.get_accessible(actor, calculation_id)
        calc.share_code = generate_share_code()
        calc.share_created_at = utcnow()
        calc.share_is_active = True
        calc = await self.calc_repo.save(calc)
        return ShareLinkResponse(share_code=calc.share_code, share_url=share_url(calc.organization.slug, calc.share_code))

    async def view_stats(self, actor: Principal, calculation_id: int) -> ViewStats:
        require_permission(actor.role, Permission.CALCULATION_VIEW)
        calc = await self.calculations.get_accessible(actor, calculation_id)
        count, last = (await self.calc_repo.view_stats([calc.id])).get(calc.id, (0, None))
        return ViewStats(total_views=count, last_viewed_at=last)

    # Public side

    async def get_public(
        self, org_slug: str, share_code: str, password: str | None = None, client_ip: str | None = None
    ) -> tuple[Calculation, PublicCalculationResponse]:
        calc = await self.calc_repo.get_shared(org_slug, share_code)
        if calc is None:
            raise NotFoundError("Kalkylen hittades inte eller är inte längre tillgänglig")
        if calc.share_expires_at and as_utc(calc.share_expires_at) < utcnow():
            raise NotFoundError("Länken har gått ut. Kontakta din säljare för en ny länk.", expired=True)

        if calc.share_password_hash:
            if not password:
                raise AuthenticationError("Lösenord krävs", password_required=True)
            ip_hash = hash_ip(client_ip) if client_ip else "unknown"
            limit = check_share_password_rate_limit(ip_hash)
            if not limit.success:
                log_security_event(
                    SecurityEventType.SHARE_PASSWORD_RATE_LIMITED,
                    ip_hash=ip_hash,
                    metadata={"shareCode": share_code, "orgSlug": org_slug, "minutesLeft": limit.minutes_until_reset},
                )
                raise RateLimitedError(f"För många försök. Vänta {limit.minutes_until_reset} minuter.")
            if not verify_password(password, calc.share_password_hash):
                log_security_event(
                    SecurityEventType.SHARE_PASSWORD_FAILED,
                    ip_hash=ip_hash,
                    metadata={"shareCode": share_code, "orgSlug": org_slug},
                )
                raise AuthenticationError("Fel lösenord", password_required=True)

        batteries = [public_battery(line) for line in calc.batteries]
        org = calc.organization
        natagare = calc.natagare
        response = PublicCalculationResponse(
            calculation=PublicCalculation(
                id=calc.id,
                customer_name=calc.customer_name,
                elomrade=calc.elomrade,
                annual_consumption_kwh=float(calc.annual_consumption_kwh),
                consumption_profile=calc.consumption_profile,
                custom_greeting=calc.custom_greeting,
                results=public_results(calc, batteries),
                batteries=batteries,
                natagare=PublicNatagare(
                    name=natagare.name,
                    day_rate_sek_kw=float(natagare.day_rate_sek_kw),
                    night_rate_sek_kw=float(natagare.night_rate_sek_kw),
                    day_start_hour=natagare.day_start_hour,
                    day_end_hour=natagare.day_end_hour,
                ),
            ),
            organization=PublicOrganization(
                name=org.name,
                slug=org.slug,
                logo_url=org.logo_url,
                primary_color=org.primary_color,
                secondary_color=org.secondary_color,
            ),
            closer_name=(calc.created_by.name if calc.created_by else None) or DEFAULT_CLOSER_NAME,
        )
        return calc, response

    async def record_view(self, calculation_id: int, user_agent: str | None, client_ip: str | None) -> None:
        """Best effort; a failed insert is logged and never reaches the prospect."""
        try:
            await self.calc_repo.add_view(
                CalculationView(
                    calculation_id=calculation_id,
                    user_agent=user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None,
                    ip_hash=hash_ip(client_ip) if client_ip else None,
                )
            )
        except SQLAlchemyError:
            # Public reads write nothing else, so rolling back loses only the view row
            await self.calc_repo.session.rollback()
            logger.warning("Failed to record view for calculation %s", calculation_id, exc_info=True)

    async def save_variant(self, org_slug: str, share_code: str, data: VariantCreate) -> VariantResponse:
        calc = await self.calc_repo.get_shared(org_slug, share_code)
        if calc is None:
            raise NotFoundError("Kalkylen hittades inte eller är inte längre tillgänglig")
        variant = await self.calc_repo.add_variant(
            CalculationVariant(
                calculation_id=calc.id,
                name=data.name,
                consumption_profile=data.consumption_profile.model_dump(),
                annual_consumption_kwh=Decimal(str(data.annual_consumption_kwh)),
                results=data.results,
            )
        )
        return VariantResponse.model_validate(variant)
