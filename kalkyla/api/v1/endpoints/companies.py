"""Company endpoints - installer companies receiving leads (super admin)."""

from fastapi import APIRouter, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.lead_repository import CompanyRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.lead import CompanyCreate, CompanyResponse, CompanyUpdate
from kalkyla.services.company_service import CompanyService

router = APIRouter()


def _get_company_service(session: DbSession) -> CompanyService:
    return CompanyService(CompanyRepository(session))


@router.get("", response_model=list[CompanyResponse])
async def list_companies(session: DbSession, user: CurrentUser):
    return await _get_company_service(session).list_companies(user)


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(session: DbSession, data: CompanyCreate, user: CurrentUser):
    return await _get_company_service(session).create(user, data)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(session: DbSession, company_id: int, data: CompanyUpdate, user: CurrentUser):
    return await _get_company_service(session).update(user, company_id, data)


@router.post("/{company_id}/toggle", response_model=CompanyResponse)
async def toggle_company(session: DbSession, company_id: int, user: CurrentUser):
    return await _get_company_service(session).toggle_active(user, company_id)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(session: DbSession, company_id: int, user: CurrentUser):
    await _get_company_service(session).delete(user, company_id)
