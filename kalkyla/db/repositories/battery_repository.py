"""Battery brand and config queries, always within one organization."""

from sqlalchemy import func, select

from kalkyla.db.models.battery import BatteryBrand, BatteryConfig
from kalkyla.db.models.calculation import CalculationBattery
from kalkyla.db.repositories.base_repository import TenantRepository


class BatteryBrandRepository(TenantRepository[BatteryBrand]):
    def __init__(self, session):
        super().__init__(session, BatteryBrand)

    async def list_for_org(self, org_id: int) -> list[BatteryBrand]:
        result = await self.session.execute(
            select(BatteryBrand).where(BatteryBrand.org_id == org_id).order_by(BatteryBrand.name)
        )
        return list(result.scalars().all())

    async def count_configs(self, brand_id: int) -> int:
        result = await self.session.execute(
            select(func.count(BatteryConfig.id)).where(BatteryConfig.brand_id == brand_id)
        )
        return result.scalar_one()

    async def config_counts(self, org_id: int) -> dict[int, int]:
        result = await self.session.execute(
            select(BatteryConfig.brand_id, func.count(BatteryConfig.id))
            .where(BatteryConfig.org_id == org_id)
            .group_by(BatteryConfig.brand_id)
        )
        return {brand_id: count for brand_id, count in result.all()}


class BatteryConfigRepository(TenantRepository[BatteryConfig]):
    def __init__(self, session):
        super().__init__(session, BatteryConfig)

    async def get_by_brand_and_name(self, org_id: int, brand_id: int, name: str) -> BatteryConfig | None:
        result = await self.session.execute(
            select(BatteryConfig).where(
                BatteryConfig.org_id == org_id,
                BatteryConfig.brand_id == brand_id,
                BatteryConfig.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_org(
        self, org_id: int, *, brand_id: int | None = None, active_only: bool = True
    ) -> list[BatteryConfig]:
        stmt = select(BatteryConfig).where(BatteryConfig.org_id == org_id)
        if brand_id is not None:
            stmt = stmt.where(BatteryConfig.brand_id == brand_id)
        if active_only:
            stmt = stmt.where(BatteryConfig.is_active.is_(True))
        result = await self.session.execute(stmt.order_by(BatteryConfig.brand_id, BatteryConfig.name))
        return list(result.scalars().all())

    async def get_many_in_org(self, ids: list[int], org_id: int) -> dict[int, BatteryConfig]:
        if not ids:
            return {}
        result = await self.session.execute(
            select(BatteryConfig).where(BatteryConfig.id.in_(ids), BatteryConfig.org_id == org_id)
        )
        return {c.id: c for c in result.scalars().all()}

    async def is_in_use(self, config_id: int) -> bool:
        result = await self.session.execute(
            select(func.count(CalculationBattery.id)).where(CalculationBattery.battery_config_id == config_id)
        )
        return result.scalar_one() > 0
