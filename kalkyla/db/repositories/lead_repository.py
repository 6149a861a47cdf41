"""Lead and company queries for matching and the admin views."""

from datetime import datetime

from sqlalchemy import func, select

from kalkyla.db.models.enums import Elomrade, LeadStatus
from kalkyla.db.models.lead import Company, Lead, LeadCompanyMatch
from kalkyla.db.repositories.base_repository import BaseRepository


class LeadRepository(BaseRepository[Lead]):
    def __init__(self, session):
        super().__init__(session, Lead)

    async def list_filtered(
        self,
        *,
        status: LeadStatus | None = None,
        elomrade: Elomrade | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Lead]:
        stmt = select(Lead)
        if status is not None:
            stmt = stmt.where(Lead.status == status)
        if elomrade is not None:
            stmt = stmt.where(Lead.elomrade == elomrade)
        if date_from is not None:
            stmt = stmt.where(Lead.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Lead.created_at <= date_to)
        result = await self.session.execute(stmt.order_by(Lead.created_at.desc(), Lead.id.desc()))
        return list(result.scalars().all())


class CompanyRepository(BaseRepository[Company]):
    def __init__(self, session):
        super().__init__(session, Company)

    async def list_all(self) -> list[Company]:
        result = await self.session.execute(select(Company).order_by(Company.name))
        return list(result.scalars().all())

    async def list_active(self) -> list[Company]:
        result = await self.session.execute(
            select(Company).where(Company.is_active.is_(True)).order_by(Company.leads_today, Company.id)
        )
        return list(result.scalars().all())

    async def match_counts(self) -> dict[int, int]:
        result = await self.session.execute(
            select(LeadCompanyMatch.company_id, func.count(LeadCompanyMatch.id)).group_by(
                LeadCompanyMatch.company_id
            )
        )
        return {company_id: count for company_id, count in result.all()}
