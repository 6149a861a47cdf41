"""Organization queries, including per-tenant aggregate counts for admin lists."""

from sqlalchemy import func, select

from kalkyla.db.models.calculation import Calculation, CalculationView
from kalkyla.db.models.enums import CalculationStatus
from kalkyla.db.models.organization import Organization
from kalkyla.db.models.user import User
from kalkyla.db.repositories.base_repository import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    def __init__(self, session):
        super().__init__(session, Organization)

    async def get_by_slug(self, slug: str) -> Organization | None:
        result = await self.session.execute(select(Organization).where(Organization.slug == slug))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Organization]:
        result = await self.session.execute(select(Organization).order_by(Organization.name))
        return list(result.scalars().all())

    async def user_counts(self, *, active_only: bool = False) -> dict[int, int]:
        stmt = select(User.org_id, func.count(User.id)).where(User.org_id.is_not(None)).group_by(User.org_id)
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        result = await self.session.execute(stmt)
        return {org_id: count for org_id, count in result.all()}

    async def calculation_counts(self) -> dict[int, int]:
        result = await self.session.execute(
            select(Calculation.org_id, func.count(Calculation.id))
            .where(Calculation.status != CalculationStatus.ARCHIVED)
            .group_by(Calculation.org_id)
        )
        return {org_id: count for org_id, count in result.all()}

    async def view_counts(self) -> dict[int, int]:
        result = await self.session.execute(
            select(Calculation.org_id, func.count(CalculationView.id))
            .join(CalculationView, CalculationView.calculation_id == Calculation.id)
            .group_by(Calculation.org_id)
        )
        return {org_id: count for org_id, count in result.all()}
