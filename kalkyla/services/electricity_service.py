"""
Electricity price service - spot price import and quarterly averages.
Challenge: Calculations need a stable day/night price per zone, while the feed is hourly
and occasionally unavailable.
Design: Hourly rows are upserted per (zone, date, hour); quarterly averages are derived from
them and cached in Redis. The daily Celery beat job calls import_day_and_refresh_quarter.
"""

import asyncio
import datetime as dt
import logging
from decimal import Decimal

import httpx

from kalkyla.calculations.constants import DEFAULT_DAY_END_HOUR, DEFAULT_DAY_START_HOUR
from kalkyla.cache.redis_client import cache_delete, cache_get_json, cache_set_json
from kalkyla.config import get_settings
from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import NotFoundError, UpstreamError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.db.models.electricity import ElectricityPriceQuarterly
from kalkyla.db.models.enums import Elomrade
from kalkyla.db.repositories.electricity_repository import ElectricityPriceRepository, QuarterlyPriceRepository
from kalkyla.db.session import session_scope
from kalkyla.integrations.mgrey_client import PriceFetchError, fetch_day_prices
from kalkyla.schemas.electricity import (
    BackfillRequest,
    BackfillResult,
    FetchResult,
    QuarterlyPriceResponse,
    RecalculateResult,
)

logger = logging.getLogger(__name__)
settings = get_settings()

LATEST_CACHE_KEY = "elprices:quarterly:latest"
BACKFILL_DELAY_SECONDS = 0.1
FOUR_DECIMALS = Decimal("0.0001")


def quarter_of(day: dt.date) -> tuple[int, int]:
    return day.year, (day.month - 1) // 3 + 1


def quarter_bounds(year: int, quarter: int) -> tuple[dt.date, dt.date]:
    """First and last day of a calendar quarter."""
    start = dt.date(year, (quarter - 1) * 3 + 1, 1)
    next_start = dt.date(year + 1, 1, 1) if quarter == 4 else dt.date(year, quarter * 3 + 1, 1)
    return start, next_start - dt.timedelta(days=1)


def _average(values: list[Decimal]) -> Decimal:
    if not values:
        return Decimal(0)
    return (sum(values, Decimal(0)) / len(values)).quantize(FOUR_DECIMALS)


class ElectricityService:
    def __init__(self, price_repo: ElectricityPriceRepository, quarterly_repo: QuarterlyPriceRepository):
        self.price_repo = price_repo
        self.quarterly_repo = quarterly_repo

    async def fetch_and_store(self, day: dt.date, client: httpx.AsyncClient | None = None) -> FetchResult:
        try:
            prices = await fetch_day_prices(day, client=client)
        except PriceFetchError as exc:
            logger.warning("Price fetch for %s failed: %s", day, exc)
            raise UpstreamError(f"Kunde inte hämta elpriser: {exc}") from exc

        count = 0
        for zone, hourly in prices.items():
            for hour, price in hourly:
                await self.price_repo.upsert_hourly(zone, day, hour, price)
                count += 1
        logger.info("Stored %d hourly prices for %s", count, day)
        return FetchResult(date=day, count=count)

    async def backfill(self, start: dt.date, end: dt.date, client: httpx.AsyncClient | None = None) -> BackfillResult:
        """One request per day with a short pause; failed days are logged and skipped."""
        total_days = successful = records = 0
        day = start
        while day <= end:
            total_days += 1
            try:
                result = await self.fetch_and_store(day, client=client)
                successful += 1
                records += result.count
            except UpstreamError:
                logger.warning("Backfill skipped %s", day)
            day += dt.timedelta(days=1)
            if day <= end:
                await asyncio.sleep(BACKFILL_DELAY_SECONDS)
        return BackfillResult(total_days=total_days, successful_days=successful, total_records=records)

    async def calculate_quarterly_averages(
        self, elomrade: Elomrade, year: int, quarter: int
    ) -> ElectricityPriceQuarterly:
        """Day hours 06-21, night 22-05, plus an all-hours average."""
        start, end = quarter_bounds(year, quarter)
        rows = await self.price_repo.get_range(elomrade, start, end)
        if not rows:
            raise NotFoundError("Ingen prisdata för perioden", elomrade=elomrade.value, year=year, quarter=quarter)

        day_prices = [r.price_ore for r in rows if DEFAULT_DAY_START_HOUR <= r.hour < DEFAULT_DAY_END_HOUR]
        night_prices = [r.price_ore for r in rows if not DEFAULT_DAY_START_HOUR <= r.hour < DEFAULT_DAY_END_HOUR]
        row = await self.quarterly_repo.upsert(
            elomrade,
            year,
            quarter,
            avg_day=_average(day_prices),
            avg_night=_average(night_prices),
            avg_all=_average([r.price_ore for r in rows]),
        )
        await cache_delete(LATEST_CACHE_KEY)
        return row

    async def latest(self, actor: Principal) -> dict[str, QuarterlyPriceResponse | None]:
        """Most recent quarter per zone; zones without data map to None."""
        require_permission(actor.role, Permission.ELPRICES_VIEW)
        cached = await cache_get_json(LATEST_CACHE_KEY)
        if cached is not None:
            return {zone: QuarterlyPriceResponse(**row) if row else None for zone, row in cached.items()}

        latest: dict[str, QuarterlyPriceResponse | None] = {}
        for zone in Elomrade:
            row = await self.quarterly_repo.latest(zone)
            latest[zone.value] = QuarterlyPriceResponse.model_validate(row) if row else None
        await cache_set_json(
            LATEST_CACHE_KEY,
            {zone: row.model_dump(mode="json") if row else None for zone, row in latest.items()},
            ttl_seconds=settings.electricity_cache_ttl_seconds,
        )
        return latest

    async def history(self, actor: Principal, elomrade: Elomrade, count: int = 8) -> list[QuarterlyPriceResponse]:
        require_permission(actor.role, Permission.ELPRICES_VIEW)
        rows = await self.quarterly_repo.history(elomrade, limit=count)
        return [QuarterlyPriceResponse.model_validate(r) for r in rows]

    async def fetch_today(self, actor: Principal) -> FetchResult:
        require_permission(actor.role, Permission.ELPRICES_MANAGE)
        return await self.fetch_and_store(dt.date.today())

    async def request_backfill(self, actor: Principal, data: BackfillRequest) -> BackfillResult:
        require_permission(actor.role, Permission.ELPRICES_MANAGE)
        result = await self.backfill(data.start_date, data.end_date)
        logger.info("Backfill %s..%s by user %s: %s", data.start_date, data.end_date, actor.id, result)
        return result

    async def recalculate_current_quarter(self, actor: Principal) -> RecalculateResult:
        require_permission(actor.role, Permission.ELPRICES_MANAGE)
        return await self.refresh_quarter(dt.date.today())

    async def refresh_quarter(self, day: dt.date) -> RecalculateResult:
        """Recompute all zones for the quarter containing day; zones without data are reported."""
        year, quarter = quarter_of(day)
        updated: list[Elomrade] = []
        errors: dict[str, str] = {}
        for zone in Elomrade:
            try:
                await self.calculate_quarterly_averages(zone, year, quarter)
                updated.append(zone)
            except NotFoundError as exc:
                errors[zone.value] = exc.message
        if errors:
            logger.warning("Quarterly averages %dQ%d missing for %s", year, quarter, ", ".join(errors))
        return RecalculateResult(year=year, quarter=quarter, updated=updated, errors=errors)


async def import_day_and_refresh_quarter(day: dt.date) -> dict:
    """Entry point for the scheduled Celery job (own session, commits on success)."""
    async with session_scope() as session:
        service = ElectricityService(ElectricityPriceRepository(session), QuarterlyPriceRepository(session))
        fetched = await service.fetch_and_store(day)
        refreshed = await service.refresh_quarter(day)
    return {"date": day.isoformat(), "count": fetched.count, "updated": [z.value for z in refreshed.updated]}
