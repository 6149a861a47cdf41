"""Company service - installer companies that receive marketplace leads (super admin only)."""

import logging

from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import NotFoundError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.db.models.lead import Company
from kalkyla.db.repositories.lead_repository import CompanyRepository
from kalkyla.schemas.lead import CompanyCreate, CompanyResponse, CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, repo: CompanyRepository):
        self.repo = repo

    async def list_companies(self, actor: Principal) -> list[CompanyResponse]:
        require_permission(actor.role, Permission.ORG_VIEW_ALL)
        counts = await self.repo.match_counts()
        return [
            CompanyResponse.model_validate(c).model_copy(update={"match_count": counts.get(c.id, 0)})
            for c in await self.repo.list_all()
        ]

    async def create(self, actor: Principal, data: CompanyCreate) -> CompanyResponse:
        require_permission(actor.role, Permission.ORG_CREATE)
        values = data.model_dump()
        values["webhook_url"] = values["webhook_url"] or None
        company = await self.repo.add(Company(is_active=True, leads_today=0, **values))
        logger.info("Company %s created by user %s", company.id, actor.id)
        return CompanyResponse.model_validate(company)

    async def update(self, actor: Principal, company_id: int, data: CompanyUpdate) -> CompanyResponse:
        require_permission(actor.role, Permission.ORG_EDIT_ANY)
        company = await self._get(company_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "webhook_url":
                value = value or None
            elif value is None and field != "phone" and field != "service_area_polygon":
                continue
            setattr(company, field, value)
        return await self._response(await self.repo.save(company))

    async def toggle_active(self, actor: Principal, company_id: int) -> CompanyResponse:
        require_permission(actor.role, Permission.ORG_EDIT_ANY)
        company = await self._get(company_id)
        company.is_active = not company.is_active
        return await self._response(await self.repo.save(company))

    async def delete(self, actor: Principal, company_id: int) -> None:
        require_permission(actor.role, Permission.ORG_DELETE)
        await self.repo.delete(await self._get(company_id))

    async def _get(self, company_id: int) -> Company:
        company = await self.repo.get_by_id(company_id)
        if company is None:
            raise NotFoundError("Företaget hittades inte")
        return company

    async def _response(self, company: Company) -> CompanyResponse:
        counts = await self.repo.match_counts()
        return CompanyResponse.model_validate(company).model_copy(update={"match_count": counts.get(company.id, 0)})
