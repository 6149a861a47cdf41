"""
Calculation repository - quotes, share lookups and view statistics.
Challenge: Role-dependent listing scopes and per-row view aggregates without N+1.
"""

from datetime import datetime

from sqlalchemy import delete, func, select

from kalkyla.db.models.calculation import (
    Calculation,
    CalculationBattery,
    CalculationVariant,
    CalculationView,
)
from kalkyla.db.models.enums import CalculationStatus
from kalkyla.db.models.organization import Organization
from kalkyla.db.repositories.base_repository import BaseRepository


class CalculationRepository(BaseRepository[Calculation]):
    def __init__(self, session):
        super().__init__(session, Calculation)

    async def list_scoped(
        self,
        *,
        org_id: int | None = None,
        created_by_id: int | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        include_archived: bool = False,
        limit: int | None = None,
    ) -> list[Calculation]:
        """Newest first. None filters mean "no restriction"."""
        stmt = select(Calculation)
        if org_id is not None:
            stmt = stmt.where(Calculation.org_id == org_id)
        if created_by_id is not None:
            stmt = stmt.where(Calculation.created_by_id == created_by_id)
        if date_from is not None:
            stmt = stmt.where(Calculation.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Calculation.created_at <= date_to)
        if not include_archived:
            stmt = stmt.where(Calculation.status != CalculationStatus.ARCHIVED)
        stmt = stmt.order_by(Calculation.updated_at.desc(), Calculation.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_scoped(self, *, org_id: int | None = None, created_by_id: int | None = None) -> int:
        stmt = select(func.count(Calculation.id)).where(Calculation.status != CalculationStatus.ARCHIVED)
        if org_id is not None:
            stmt = stmt.where(Calculation.org_id == org_id)
        if created_by_id is not None:
            stmt = stmt.where(Calculation.created_by_id == created_by_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_shared(self, org_slug: str, share_code: str) -> Calculation | None:
        """Active, non-archived share link belonging to the org in the URL."""
        result = await self.session.execute(
            select(Calculation)
            .join(Organization, Organization.id == Calculation.org_id)
            .where(
                Calculation.share_code == share_code,
                Organization.slug == org_slug,
                Calculation.share_is_active.is_(True),
                Calculation.status != CalculationStatus.ARCHIVED,
            )
        )
        return result.scalar_one_or_none()

    async def replace_batteries(self, calculation: Calculation, batteries: list[CalculationBattery]) -> None:
        """Delete existing rows and insert the new list in order."""
        await self.session.execute(
            delete(CalculationBattery).where(CalculationBattery.calculation_id == calculation.id)
        )
        for index, battery in enumerate(batteries):
            battery.calculation_id = calculation.id
            battery.sort_order = index
            self.session.add(battery)
        await self.session.flush()
        await self.session.refresh(calculation, attribute_names=["batteries"])

    # Views

    async def add_view(self, view: CalculationView) -> None:
        self.session.add(view)
        await self.session.flush()

    async def view_stats(self, calculation_ids: list[int]) -> dict[int, tuple[int, datetime | None]]:
        """calculation id -> (view count, last viewed at)."""
        if not calculation_ids:
            return {}
        result = await self.session.execute(
            select(
                CalculationView.calculation_id,
                func.count(CalculationView.id),
                func.max(CalculationView.viewed_at),
            )
            .where(CalculationView.calculation_id.in_(calculation_ids))
            .group_by(CalculationView.calculation_id)
        )
        return {calc_id: (count, last) for calc_id, count, last in result.all()}

    async def total_views(self, *, org_id: int | None = None, created_by_id: int | None = None) -> int:
        stmt = select(func.count(CalculationView.id)).join(
            Calculation, Calculation.id == CalculationView.calculation_id
        )
        if org_id is not None:
            stmt = stmt.where(Calculation.org_id == org_id)
        if created_by_id is not None:
            stmt = stmt.where(Calculation.created_by_id == created_by_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # Variants

    async def add_variant(self, variant: CalculationVariant) -> CalculationVariant:
        return await self.add(variant)
