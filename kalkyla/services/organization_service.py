"""
Organization service - tenant lifecycle and branding.
Challenge: Super admins manage every tenant; org admins only edit their own branding.
"""

import logging
from decimal import Decimal

from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from kalkyla.core.permissions import Permission, can_access_org, require_permission
from kalkyla.db.models.organization import Organization
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.schemas.organization import (
    OrganizationCreate,
    OrganizationDetail,
    OrganizationListItem,
    OrganizationResponse,
    OrganizationUpdate,
)
from kalkyla.schemas.user import UserResponse
from kalkyla.services.natagare_service import seed_default_natagare

logger = logging.getLogger(__name__)


def _money(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))


class OrganizationService:
    def __init__(self, org_repo: OrganizationRepository, user_repo: UserRepository):
        self.org_repo = org_repo
        self.user_repo = user_repo

    async def create(self, actor: Principal, data: OrganizationCreate) -> OrganizationResponse:
        require_permission(actor.role, Permission.ORG_CREATE)
        if await self.org_repo.get_by_slug(data.slug):
            raise ConflictError("En organisation med denna slug finns redan")

        affiliated = data.is_proffskontakt_affiliated
        org = await self.org_repo.add(
            Organization(
                name=data.name,
                slug=data.slug,
                logo_url=data.logo_url or None,
                primary_color=data.primary_color,
                secondary_color=data.secondary_color,
                is_proffskontakt_affiliated=affiliated,
                installer_fixed_cut=_money(data.installer_fixed_cut) if affiliated else None,
                margin_alert_threshold=_money(data.margin_alert_threshold) if affiliated else None,
            )
        )
        await seed_default_natagare(self.org_repo.session, org.id)
        log_security_event(SecurityEventType.ORG_CREATED, user_id=actor.id, target_org_id=org.id)
        return OrganizationResponse.model_validate(org)

    async def update(self, actor: Principal, org_id: int, data: OrganizationUpdate) -> OrganizationResponse:
        org = await self._get_editable(actor, org_id)
        changes = data.model_dump(exclude_unset=True)

        if not actor.is_super_admin:
            for field in ("is_proffskontakt_affiliated", "installer_fixed_cut"):
                if field in changes:
                    raise PermissionDeniedError("Endast superadmin kan ändra ProffsKontakt-inställningar")

        for field in ("name", "primary_color", "secondary_color", "is_proffskontakt_affiliated"):
            if changes.get(field) is not None:
                setattr(org, field, changes[field])
        if "logo_url" in changes:
            org.logo_url = changes["logo_url"] or None
        for field in ("installer_fixed_cut", "margin_alert_threshold"):
            if field in changes:
                setattr(org, field, _money(changes[field]))
        if not org.is_proffskontakt_affiliated:
            org.installer_fixed_cut = None
            org.margin_alert_threshold = None

        org = await self.org_repo.save(org)
        log_security_event(
            SecurityEventType.ORG_UPDATED, user_id=actor.id, target_org_id=org.id, metadata={"fields": sorted(changes)}
        )
        return OrganizationResponse.model_validate(org)

    async def list_organizations(self, actor: Principal) -> list[OrganizationListItem]:
        require_permission(actor.role, Permission.ORG_VIEW_ALL)
        counts = await self.org_repo.user_counts()
        return [
            OrganizationListItem.model_validate(org).model_copy(update={"user_count": counts.get(org.id, 0)})
            for org in await self.org_repo.list_all()
        ]

    async def get(self, actor: Principal, org_id: int) -> OrganizationDetail:
        if not (actor.can(Permission.ORG_VIEW_ALL) or actor.org_id == org_id):
            raise PermissionDeniedError("Åtkomst nekad")
        org = await self.org_repo.get_by_id(org_id)
        if not org:
            raise NotFoundError("Organisationen hittades inte")
        users = await self.user_repo.list_users(org_id=org.id)
        detail = OrganizationDetail.model_validate(org)
        return detail.model_copy(update={"users": [UserResponse.model_validate(u) for u in users]})

    async def _get_editable(self, actor: Principal, org_id: int) -> Organization:
        allowed = actor.can(Permission.ORG_EDIT_ANY) or (
            actor.can(Permission.ORG_EDIT_OWN) and can_access_org(actor.role, actor.org_id, org_id)
        )
        if not allowed:
            raise PermissionDeniedError("Åtkomst nekad")
        org = await self.org_repo.get_by_id(org_id)
        if not org:
            raise NotFoundError("Organisationen hittades inte")
        return org
