"""
Dashboard service - role-scoped totals and recent activity.
Challenge: The same page shows a closer their own numbers, an org admin the org, a super admin everything.
Design: Reuses CalculationService.scope_filters so listing and stats never disagree.
"""

from datetime import datetime

from kalkyla.core.dependencies import Principal
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.db.repositories.calculation_repository import CalculationRepository
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.schemas.calculation import CalculationListItem
from kalkyla.schemas.dashboard import DashboardStats
from kalkyla.schemas.organization import OrganizationStats
from kalkyla.services.calculation_service import CalculationService, to_list_item

RECENT_LIMIT = 10
ADMIN_LIST_LIMIT = 100


class DashboardService:
    def __init__(
        self,
        calc_repo: CalculationRepository,
        org_repo: OrganizationRepository,
        calculation_service: CalculationService,
    ):
        self.calc_repo = calc_repo
        self.org_repo = org_repo
        self.calculations = calculation_service

    async def stats(self, actor: Principal) -> DashboardStats:
        require_permission(actor.role, Permission.CALCULATION_VIEW)
        scope = self.calculations.scope_filters(actor)
        recent = await self.calc_repo.list_scoped(limit=RECENT_LIMIT, **scope)
        return DashboardStats(
            total_calculations=await self.calc_repo.count_scoped(**scope),
            total_views=await self.calc_repo.total_views(**scope),
            recent_calculations=await self._list_items(recent),
        )

    async def organizations_with_stats(self, actor: Principal) -> list[OrganizationStats]:
        require_permission(actor.role, Permission.ORG_VIEW_ALL)
        calc_counts = await self.org_repo.calculation_counts()
        user_counts = await self.org_repo.user_counts(active_only=True)
        view_counts = await self.org_repo.view_counts()
        return [
            OrganizationStats(
                id=org.id,
                name=org.name,
                slug=org.slug,
                calculation_count=calc_counts.get(org.id, 0),
                active_user_count=user_counts.get(org.id, 0),
                total_views=view_counts.get(org.id, 0),
            )
            for org in await self.org_repo.list_all()
        ]

    async def all_calculations(
        self,
        actor: Principal,
        *,
        org_id: int | None = None,
        closer_id: int | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[CalculationListItem]:
        """Cross-tenant listing for super admins, newest first."""
        require_permission(actor.role, Permission.CALCULATION_VIEW_ALL)
        calcs = await self.calc_repo.list_scoped(
            org_id=org_id,
            created_by_id=closer_id,
            date_from=date_from,
            date_to=date_to,
            limit=ADMIN_LIST_LIMIT,
        )
        return await self._list_items(calcs)

    async def _list_items(self, calcs) -> list[CalculationListItem]:
        stats = await self.calc_repo.view_stats([c.id for c in calcs])
        return [to_list_item(c, stats.get(c.id)) for c in calcs]
