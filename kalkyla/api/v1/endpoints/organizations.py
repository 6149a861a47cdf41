"""
Organization endpoints - tenant administration.
Design: Thin controller; OrganizationService enforces super admin vs own-org rules.
"""

from fastapi import APIRouter, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.organization import (
    OrganizationCreate,
    OrganizationDetail,
    OrganizationListItem,
    OrganizationResponse,
    OrganizationUpdate,
)
from kalkyla.services.organization_service import OrganizationService

router = APIRouter()


def _get_org_service(session: DbSession) -> OrganizationService:
    return OrganizationService(OrganizationRepository(session), UserRepository(session))


@router.get("", response_model=list[OrganizationListItem])
async def list_organizations(session: DbSession, user: CurrentUser):
    return await _get_org_service(session).list_organizations(user)


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(session: DbSession, data: OrganizationCreate, user: CurrentUser):
    """Create a tenant and seed its default grid operators."""
    return await _get_org_service(session).create(user, data)


@router.get("/{org_id}", response_model=OrganizationDetail)
async def get_organization(session: DbSession, org_id: int, user: CurrentUser):
    return await _get_org_service(session).get(user, org_id)


@router.put("/{org_id}", response_model=OrganizationResponse)
async def update_organization(session: DbSession, org_id: int, data: OrganizationUpdate, user: CurrentUser):
    return await _get_org_service(session).update(user, org_id, data)
