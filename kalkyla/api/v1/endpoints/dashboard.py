"""Dashboard endpoints - role-scoped stats and super admin overviews."""

from datetime import datetime

from fastapi import APIRouter, Query

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.battery_repository import BatteryConfigRepository
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.electricity_repository import QuarterlyPriceRepository
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.calculation import CalculationListItem
from kalkyla.schemas.dashboard import DashboardStats
from kalkyla.schemas.organization import OrganizationStats
from kalkyla.services.calculation_service import CalculationService
from kalkyla.services.dashboard_service import DashboardService

router = APIRouter()


def _get_dashboard_service(session: DbSession) -> DashboardService:
    calc_repo = CalculationRepository(session)
    calculations = CalculationService(
        calc_repo,
        BatteryConfigRepository(session),
        NatagareRepository(session),
        QuarterlyPriceRepository(session),
    )
    return DashboardService(calc_repo, OrganizationRepository(session), calculations)


@router.get("/stats", response_model=DashboardStats)
async def stats(session: DbSession, user: CurrentUser):
    """Closer: own numbers. Org admin: org. Super admin: everything."""
    return await _get_dashboard_service(session).stats(user)


@router.get("/organizations", response_model=list[OrganizationStats])
async def organizations_with_stats(session: DbSession, user: CurrentUser):
    return await _get_dashboard_service(session).organizations_with_stats(user)


@router.get("/calculations", response_model=list[CalculationListItem])
async def all_calculations(
    session: DbSession,
    user: CurrentUser,
    org_id: int | None = Query(None),
    closer_id: int | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
):
    return await _get_dashboard_service(session).all_calculations(
        user, org_id=org_id, closer_id=closer_id, date_from=date_from, date_to=date_to
    )
