from sqlalchemy import func, select

from kalkyla.db.models.calculation import Calculation
from kalkyla.db.models.natagare import Natagare
from kalkyla.db.repositories.base_repository import TenantRepository


class NatagareRepository(TenantRepository[Natagare]):
    def __init__(self, session):
        super().__init__(session, Natagare)

    async def list_for_org(self, org_id: int, *, active_only: bool = False) -> list[Natagare]:
        stmt = select(Natagare).where(Natagare.org_id == org_id)
        if active_only:
            stmt = stmt.where(Natagare.is_active.is_(True))
        result = await self.session.execute(stmt.order_by(Natagare.is_default.desc(), Natagare.name))
        return list(result.scalars().all())

    async def is_in_use(self, natagare_id: int) -> bool:
        result = await self.session.execute(
            select(func.count(Calculation.id)).where(Calculation.natagare_id == natagare_id)
        )
        return result.scalar_one() > 0
