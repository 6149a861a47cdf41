"""
Calculation endpoints - drafts, finalize, archive and share link management.
Challenge: Role-dependent visibility (closer own, org admin org, super admin all).
Design: Thin controller; CalculationService and ShareService hold the rules.
"""

from fastapi import APIRouter, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.battery_repository import BatteryConfigRepository
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.electricity_repository import QuarterlyPriceRepository
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.calculation import (
    CalculationListItem,
    CalculationResponse,
    FinalizeRequest,
    SaveDraftRequest,
)
from kalkyla.schemas.common import MessageResponse
from kalkyla.schemas.share import ShareLinkResponse, ShareLinkSettings, ViewStats
from kalkyla.services.calculation_service import CalculationService
from kalkyla.services.share_service import ShareService

router = APIRouter()


def _get_calculation_service(session: DbSession) -> CalculationService:
    return CalculationService(
        CalculationRepository(session),
        BatteryConfigRepository(session),
        NatagareRepository(session),
        QuarterlyPriceRepository(session),
    )


def _get_share_service(session: DbSession) -> ShareService:
    return ShareService(CalculationRepository(session), _get_calculation_service(session))


@router.get("", response_model=list[CalculationListItem])
async def list_calculations(session: DbSession, user: CurrentUser):
    return await _get_calculation_service(session).list_calculations(user)


@router.post("/draft", response_model=CalculationResponse)
async def save_draft(session: DbSession, data: SaveDraftRequest, user: CurrentUser):
    """Create a draft (no id) or update one; the battery list is replaced as sent."""
    return await _get_calculation_service(session).save_draft(user, data)


@router.get("/{calculation_id}", response_model=CalculationResponse)
async def get_calculation(session: DbSession, calculation_id: int, user: CurrentUser):
    return await _get_calculation_service(session).get(user, calculation_id)


@router.post("/{calculation_id}/finalize", response_model=CalculationResponse)
async def finalize_calculation(session: DbSession, calculation_id: int, data: FinalizeRequest, user: CurrentUser):
    return await _get_calculation_service(session).finalize(user, calculation_id, data)


@router.delete("/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calculation(session: DbSession, calculation_id: int, user: CurrentUser):
    """Archives; archived calculations leave lists and their share links stop working."""
    await _get_calculation_service(session).delete(user, calculation_id)


# Share links


@router.post("/{calculation_id}/share", response_model=ShareLinkResponse)
async def generate_share_link(
    session: DbSession, calculation_id: int, data: ShareLinkSettings, user: CurrentUser
):
    return await _get_share_service(session).generate(user, calculation_id, data)


@router.post("/{calculation_id}/share/regenerate", response_model=ShareLinkResponse)
async def regenerate_share_link(session: DbSession, calculation_id: int, user: CurrentUser):
    return await _get_share_service(session).regenerate(user, calculation_id)


@router.post("/{calculation_id}/share/deactivate", response_model=MessageResponse)
async def deactivate_share_link(session: DbSession, calculation_id: int, user: CurrentUser):
    await _get_share_service(session).deactivate(user, calculation_id)
    return MessageResponse()


@router.get("/{calculation_id}/views", response_model=ViewStats)
async def view_stats(session: DbSession, calculation_id: int, user: CurrentUser):
    return await _get_share_service(session).view_stats(user, calculation_id)
