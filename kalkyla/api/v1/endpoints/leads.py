"""
Lead endpoints - public questionnaire submission and super admin lead handling.
"""

from datetime import datetime

from fastapi import APIRouter, Query, Request, status

from kalkyla.config import get_settings
from kalkyla.core.dependencies import CurrentUser
from kalkyla.core.rate_limit import limiter
from kalkyla.db.models.enums import Elomrade, LeadStatus
from kalkyla.db.repositories.lead_repository import CompanyRepository, LeadRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.lead import LeadCreate, LeadCreatedResponse, LeadResponse, LeadStatusUpdate
from kalkyla.services.lead_service import LeadService

router = APIRouter()
settings = get_settings()


def _get_lead_service(session: DbSession) -> LeadService:
    return LeadService(LeadRepository(session), CompanyRepository(session))


@router.post("", response_model=LeadCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.public_rate_limit)
async def create_lead(request: Request, session: DbSession, data: LeadCreate):
    """Public: store the lead, match up to six companies and queue notifications."""
    return await _get_lead_service(session).create_lead(data)


@router.get("", response_model=list[LeadResponse])
async def list_leads(
    session: DbSession,
    user: CurrentUser,
    status_filter: LeadStatus | None = Query(None, alias="status"),
    elomrade: Elomrade | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
):
    return await _get_lead_service(session).list_leads(
        user, status=status_filter, elomrade=elomrade, date_from=date_from, date_to=date_to
    )


@router.patch("/{lead_id}/status", response_model=LeadResponse)
async def update_lead_status(session: DbSession, lead_id: int, data: LeadStatusUpdate, user: CurrentUser):
    return await _get_lead_service(session).update_status(user, lead_id, data)
