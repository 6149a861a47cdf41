"""
Electricity price endpoints - quarterly averages and manual imports.
Design: Reads need elprices:view; imports and recalculation need elprices:manage.
"""

from fastapi import APIRouter, Query

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.models.enums import Elomrade
from kalkyla.db.repositories.electricity_repository import ElectricityPriceRepository, QuarterlyPriceRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.electricity import (
    BackfillRequest,
    BackfillResult,
    FetchResult,
    QuarterlyPriceResponse,
    RecalculateResult,
)
from kalkyla.services.electricity_service import ElectricityService

router = APIRouter()


def _get_electricity_service(session: DbSession) -> ElectricityService:
    return ElectricityService(ElectricityPriceRepository(session), QuarterlyPriceRepository(session))


@router.get("/quarterly", response_model=dict[str, QuarterlyPriceResponse | None])
async def latest_quarterly(session: DbSession, user: CurrentUser):
    """Latest quarter per zone (SE1-SE4)."""
    return await _get_electricity_service(session).latest(user)


@router.get("/quarterly/{elomrade}", response_model=list[QuarterlyPriceResponse])
async def quarterly_history(
    session: DbSession, elomrade: Elomrade, user: CurrentUser, count: int = Query(8, ge=1, le=40)
):
    return await _get_electricity_service(session).history(user, elomrade, count)


@router.post("/fetch-today", response_model=FetchResult)
async def fetch_today(session: DbSession, user: CurrentUser):
    return await _get_electricity_service(session).fetch_today(user)


@router.post("/backfill", response_model=BackfillResult)
async def backfill(session: DbSession, data: BackfillRequest, user: CurrentUser):
    return await _get_electricity_service(session).request_backfill(user, data)


@router.post("/recalculate", response_model=RecalculateResult)
async def recalculate_current_quarter(session: DbSession, user: CurrentUser):
    return await _get_electricity_service(session).recalculate_current_quarter(user)
