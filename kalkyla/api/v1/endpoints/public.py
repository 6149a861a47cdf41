"""
Public endpoints - shared calculations for prospects (no authentication).
Challenge: Anonymous traffic; protect against scraping and password guessing.
Design: slowapi limit per client IP on every route; password attempts have their own
per-IP window inside ShareService.
"""

from fastapi import APIRouter, Request, status

from kalkyla.config import get_settings
from kalkyla.core.dependencies import ClientIp
from kalkyla.core.rate_limit import limiter
from kalkyla.db.repositories.battery_repository import BatteryConfigRepository
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.electricity_repository import QuarterlyPriceRepository
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.share import (
    PublicAccessRequest,
    PublicCalculationResponse,
    VariantCreate,
    VariantResponse,
)
from kalkyla.services.calculation_service import CalculationService
from kalkyla.services.share_service import ShareService

router = APIRouter()
settings = get_settings()


def _get_share_service(session: DbSession) -> ShareService:
    calc_repo = CalculationRepository(session)
    calculations = CalculationService(
        calc_repo,
        BatteryConfigRepository(session),
        NatagareRepository(session),
        QuarterlyPriceRepository(session),
    )
    return ShareService(calc_repo, calculations)


async def _open(
    session: DbSession, request: Request, org_slug: str, share_code: str, password: str | None, client_ip: str | None
) -> PublicCalculationResponse:
    svc = _get_share_service(session)
    calc, response = await svc.get_public(org_slug, share_code, password, client_ip)
    await svc.record_view(calc.id, request.headers.get("user-agent"), client_ip)
    return response


@router.get("/{org_slug}/{share_code}", response_model=PublicCalculationResponse)
@limiter.limit(settings.public_rate_limit)
async def get_shared_calculation(
    request: Request, session: DbSession, org_slug: str, share_code: str, client_ip: ClientIp
):
    """401 with password_required=true when the link is protected."""
    return await _open(session, request, org_slug, share_code, None, client_ip)


@router.post("/{org_slug}/{share_code}", response_model=PublicCalculationResponse)
@limiter.limit(settings.public_rate_limit)
async def unlock_shared_calculation(
    request: Request,
    session: DbSession,
    org_slug: str,
    share_code: str,
    data: PublicAccessRequest,
    client_ip: ClientIp,
):
    return await _open(session, request, org_slug, share_code, data.password, client_ip)


@router.post(
    "/{org_slug}/{share_code}/variants", response_model=VariantResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.public_rate_limit)
async def save_variant(request: Request, session: DbSession, org_slug: str, share_code: str, data: VariantCreate):
    """Prospect's own what-if consumption profile."""
    return await _get_share_service(session).save_variant(org_slug, share_code, data)
