"""
Calculation service - customer ROI quotes from draft to finalized.
Challenge: Closers, org admins and super admins see different slices of the same table,
and finalize must combine tenant data (battery, tariff) with shared market data (spot prices).
Design: One access check (`get_accessible`) guards every single-row operation; finalize
feeds the pure engine and queues a margin alert for affiliated orgs.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from kalkyla.calculations import CalculationInputs, calculate_battery_roi
from kalkyla.calculations.engine import BatterySpec
from kalkyla.config import get_settings
from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import DomainValidationError, NotFoundError, PermissionDeniedError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.core.timeutils import utcnow
from kalkyla.db.models.calculation import Calculation, CalculationBattery
from kalkyla.db.models.enums import CalculationStatus, UserRole
from kalkyla.db.repositories.battery_repository import BatteryConfigRepository
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.electricity_repository import QuarterlyPriceRepository
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.session import run_after_commit
from kalkyla.integrations import n8n
from kalkyla.queue.tasks import dispatch_webhook
from kalkyla.schemas.calculation import (
    CalculationBatteryResponse,
    CalculationListItem,
    CalculationResponse,
    FinalizeRequest,
    SaveDraftRequest,
)

logger = logging.getLogger(__name__)
settings = get_settings()

NOT_FOUND = "Kalkylen hittades inte"


def share_url(org_slug: str, share_code: str) -> str:
    return f"{settings.app_url}/{org_slug}/{share_code}"


def to_response(calc: Calculation) -> CalculationResponse:
    return CalculationResponse(
        id=calc.id,
        org_id=calc.org_id,
        created_by_id=calc.created_by_id,
        natagare_id=calc.natagare_id,
        customer_name=calc.customer_name,
        postal_code=calc.postal_code,
        elomrade=calc.elomrade,
        annual_consumption_kwh=float(calc.annual_consumption_kwh),
        consumption_profile=calc.consumption_profile,
        status=calc.status,
        results=calc.results,
        parameters=calc.parameters,
        finalized_at=calc.finalized_at,
        share_code=calc.share_code,
        share_is_active=calc.share_is_active,
        share_expires_at=calc.share_expires_at,
        custom_greeting=calc.custom_greeting,
        batteries=[
            CalculationBatteryResponse(
                battery_config_id=b.battery_config_id,
                name=b.battery_config.name,
                brand_name=b.battery_config.brand_name,
                total_price_ex_vat=float(b.total_price_ex_vat),
                installation_cost=float(b.installation_cost),
                sort_order=b.sort_order,
            )
            for b in calc.batteries
        ],
        created_at=calc.created_at,
        updated_at=calc.updated_at,
    )


def to_list_item(calc: Calculation, stats: tuple[int, datetime | None] | None = None) -> CalculationListItem:
    view_count, last_viewed_at = stats or (0, None)
    first = calc.batteries[0].battery_config if calc.batteries else None
    return CalculationListItem(
        id=calc.id,
        customer_name=calc.customer_name,
        elomrade=calc.elomrade,
        status=calc.status,
        battery_name=f"{first.brand_name} {first.name}" if first else None,
        created_by_name=calc.created_by.name if calc.created_by else None,
        org_name=calc.organization.name if calc.organization else None,
        share_code=calc.share_code,
        share_is_active=calc.share_is_active,
        view_count=view_count,
        last_viewed_at=last_viewed_at,
        created_at=calc.created_at,
        updated_at=calc.updated_at,
    )


class CalculationService:
    def __init__(
        self,
        calc_repo: CalculationRepository,
        config_repo: BatteryConfigRepository,
        natagare_repo: NatagareRepository,
        quarterly_repo: QuarterlyPriceRepository,
    ):
        self.calc_repo = calc_repo
        self.config_repo = config_repo
        self.natagare_repo = natagare_repo
        self.quarterly_repo = quarterly_repo

    async def save_draft(self, actor: Principal, data: SaveDraftRequest) -> CalculationResponse:
        require_permission(actor.role, Permission.CALCULATION_CREATE)
        if data.id is not None:
            require_permission(actor.role, Permission.CALCULATION_EDIT)
            calc = await self.get_accessible(actor, data.id)
            if calc.status == CalculationStatus.ARCHIVED:
                raise DomainValidationError("Arkiverade kalkyler kan inte ändras")
            org_id = calc.org_id
        else:
            calc = None
            org_id = data.org_id if actor.is_super_admin and data.org_id else actor.org_id
            if org_id is None:
                raise DomainValidationError("Välj organisation för kalkylen")

        if not await self.natagare_repo.get_in_org(data.natagare_id, org_id):
            raise NotFoundError("Nätägaren hittades inte")
        config_ids = [b.battery_config_id for b in data.batteries]
        configs = await self.config_repo.get_many_in_org(config_ids, org_id)
        missing = sorted(set(config_ids) - set(configs))
        if missing:
            raise NotFoundError("Batterikonfigurationen hittades inte", battery_config_ids=missing)

        fields = {
            "customer_name": data.customer_name,
            "postal_code": data.postal_code or None,
            "elomrade": data.elomrade,
            "natagare_id": data.natagare_id,
            "annual_consumption_kwh": Decimal(str(data.annual_consumption_kwh)),
            "consumption_profile": data.consumption_profile.model_dump(),
        }
        if calc is None:
            calc = await self.calc_repo.add(
                Calculation(org_id=org_id, created_by_id=actor.id, status=CalculationStatus.DRAFT, **fields)
            )
            logger.info("Calculation %s created by user %s", calc.id, actor.id)
        else:
            for field, value in fields.items():
                setattr(calc, field, value)
            calc = await self.calc_repo.save(calc)

        await self.calc_repo.replace_batteries(
            calc,
            [
                CalculationBattery(
                    battery_config=configs[b.battery_config_id],
                    total_price_ex_vat=Decimal(str(b.total_price_ex_vat)),
                    installation_cost=Decimal(str(b.installation_cost)),
                )
                for b in data.batteries
            ],
        )
        return to_response(calc)

    async def get(self, actor: Principal, calculation_id: int) -> CalculationResponse:
        require_permission(actor.role, Permission.CALCULATION_VIEW)
        return to_response(await self.get_accessible(actor, calculation_id))

    async def list_calculations(self, actor: Principal) -> list[CalculationListItem]:
        require_permission(actor.role, Permission.CALCULATION_VIEW)
        calcs = await self.calc_repo.list_scoped(**self.scope_filters(actor))
        stats = await self.calc_repo.view_stats([c.id for c in calcs])
        return [to_list_item(c, stats.get(c.id)) for c in calcs]

    async def finalize(self, actor: Principal, calculation_id: int, data: FinalizeRequest) -> CalculationResponse:
        require_permission(actor.role, Permission.CALCULATION_FINALIZE)
        calc = await self.get_accessible(actor, calculation_id)
        if calc.status == CalculationStatus.ARCHIVED:
            raise DomainValidationError("Arkiverade kalkyler kan inte slutföras")

        parameters = data.model_dump(exclude={"results"}, exclude_none=True)
        if data.results is not None:
            results = data.results
        else:
            results, prices = await self._run_engine(calc, data)
            parameters.update(prices)

        calc.results = results
        calc.parameters = parameters
        calc.status = CalculationStatus.COMPLETE
        calc.finalized_at = utcnow()
        calc = await self.calc_repo.save(calc)
        logger.info("Calculation %s finalized", calc.id)

        await self._check_margin(calc)
        return to_response(calc)

    async def delete(self, actor: Principal, calculation_id: int) -> None:
        """Soft delete: the row is archived and disappears from lists and share links."""
        require_permission(actor.role, Permission.CALCULATION_DELETE)
        calc = await self.get_accessible(actor, calculation_id)
        calc.status = CalculationStatus.ARCHIVED
        await self.calc_repo.save(calc)

    def scope_filters(self, actor: Principal) -> dict[str, Any]:
        """Repository filters for the calculations an actor may list."""
        if actor.can(Permission.CALCULATION_VIEW_ALL):
            return {}
        if actor.can(Permission.CALCULATION_VIEW_ORG):
            return {"org_id": actor.org_id}
        return {"org_id": actor.org_id, "created_by_id": actor.id}

    async def get_accessible(self, actor: Principal, calculation_id: int) -> Calculation:
        calc = await self.calc_repo.get_by_id(calculation_id)
        if calc is None or (not actor.is_super_admin and calc.org_id != actor.org_id):
            raise NotFoundError(NOT_FOUND)
        if actor.role == UserRole.CLOSER and calc.created_by_id != actor.id:
            raise PermissionDeniedError("Du kan bara hantera dina egna kalkyler")
        return calc

    async def _run_engine(self, calc: Calculation, data: FinalizeRequest) -> tuple[dict[str, Any], dict[str, float]]:
        if not calc.batteries:
            raise DomainValidationError("Lägg till minst ett batteri innan kalkylen slutförs")
        line = calc.batteries[0]
        config = line.battery_config

        day_price, night_price = data.day_price_ore, data.night_price_ore
        if day_price is None or night_price is None:
            quarterly = await self.quarterly_repo.latest(calc.elomrade)
            if quarterly is None:
                raise DomainValidationError(f"Elpriser saknas för {calc.elomrade.value}")
            day_price = float(quarterly.avg_day_price_ore) if day_price is None else day_price
            night_price = float(quarterly.avg_night_price_ore) if night_price is None else night_price

        org = calc.organization
        affiliated = org.is_proffskontakt_affiliated and org.installer_fixed_cut is not None
        inputs = CalculationInputs(
            battery=BatterySpec(
                capacity_kwh=config.capacity_kwh,
                max_discharge_kw=config.max_discharge_kw,
                charge_efficiency=config.charge_efficiency,
                discharge_efficiency=config.discharge_efficiency,
                warranty_years=config.warranty_years,
                guaranteed_cycles=config.guaranteed_cycles,
            ),
            day_price_ore=Decimal(str(day_price)),
            night_price_ore=Decimal(str(night_price)),
            effect_tariff_day_rate=calc.natagare.day_rate_sek_kw,
            effect_tariff_night_rate=calc.natagare.night_rate_sek_kw,
            total_price_ex_vat=line.total_price_ex_vat,
            installation_cost=line.installation_cost,
            cycles_per_day=Decimal(str(data.cycles_per_day)),
            avg_discharge_percent=Decimal(str(data.avg_discharge_percent)),
            installer_cut=org.installer_fixed_cut if affiliated else None,
            battery_cost_price=config.cost_price if affiliated else None,
            peak_shaving_percent=_decimal(data.peak_shaving_percent),
            current_peak_kw=_decimal(data.current_peak_kw),
            post_campaign_rate_per_kw_year=_decimal(data.post_campaign_rate_per_kw_year),
            elomrade=calc.elomrade.value,
            is_emaldo_battery=config.is_emaldo,
        )
        if data.grid_services_rate_per_kw_year is not None:
            inputs.grid_services_rate_per_kw_year = Decimal(str(data.grid_services_rate_per_kw_year))

        results = calculate_battery_roi(inputs)
        # Echo the inputs the public breakdown needs
        results["cyclesPerDay"] = data.cycles_per_day
        results["spreadOre"] = day_price - night_price
        if data.current_peak_kw is not None:
            results["currentPeakKw"] = data.current_peak_kw
        if data.peak_shaving_percent is not None:
            results["peakShavingPercent"] = data.peak_shaving_percent
        if data.post_campaign_rate_per_kw_year is not None:
            results["postCampaignRatePerKwYear"] = data.post_campaign_rate_per_kw_year
        return results, {"day_price_ore": day_price, "night_price_ore": night_price}

    async def _check_margin(self, calc: Calculation) -> None:
        org = calc.organization
        margin = (calc.results or {}).get("marginSek")
        if not org.is_proffskontakt_affiliated or org.margin_alert_threshold is None or margin is None:
            return
        threshold = float(org.margin_alert_threshold)
        if margin >= threshold:
            return

        line = calc.batteries[0] if calc.batteries else None
        stats = await self.calc_repo.view_stats([calc.id])
        logger.warning("Margin %.0f SEK below threshold %.0f for calculation %s", margin, threshold, calc.id)
        run_after_commit(
            self.calc_repo.session,
            dispatch_webhook,
            n8n.MARGIN_ALERT,
            {
                "calculationId": calc.id,
                "orgId": org.id,
                "orgName": org.name,
                "closerId": calc.created_by_id,
                "closerName": calc.created_by.name,
                "closerEmail": calc.created_by.email,
                "customerName": calc.customer_name,
                "batteryName": line.battery_config.name if line else None,
                "totalPriceExVat": float(line.total_price_ex_vat) if line else None,
                "batteryCostPrice": float(line.battery_config.cost_price) if line else None,
                "installerFixedCut": float(org.installer_fixed_cut or 0),
                "marginSek": margin,
                "threshold": threshold,
                "shareUrl": share_url(org.slug, calc.share_code) if calc.share_is_active and calc.share_code else None,
                "createdAt": calc.created_at.isoformat(),
                "viewCount": stats.get(calc.id, (0, None))[0],
            },
        )


def _decimal(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))
