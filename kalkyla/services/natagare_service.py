"""
Grid operator service - per-org effect tariffs with protected defaults.
"""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import ConflictError, DomainValidationError, NotFoundError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.db.models.natagare import Natagare
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.schemas.natagare import NatagareCreate, NatagareResponse, NatagareUpdate
from kalkyla.services.scope import resolve_org_id

logger = logging.getLogger(__name__)

# (name, day SEK/kW, night SEK/kW); all use the 06-22 day window
DEFAULT_NATAGARE = [
    ("Ellevio", Decimal("81.25"), Decimal("40.625")),
    ("Vattenfall Eldistribution (verifiera priser)", Decimal("75"), Decimal("37.5")),
    ("E.ON Energidistribution (verifiera priser)", Decimal("70"), Decimal("35")),
]


async def seed_default_natagare(session: AsyncSession, org_id: int) -> int:
    """Create missing default operators for an org. Returns the number created."""
    repo = NatagareRepository(session)
    created = 0
    for name, day_rate, night_rate in DEFAULT_NATAGARE:
        if await repo.get_by_name(org_id, name):
            continue
        session.add(
            Natagare(
                org_id=org_id,
                name=name,
                day_rate_sek_kw=day_rate,
                night_rate_sek_kw=night_rate,
                day_start_hour=6,
                day_end_hour=22,
                is_default=True,
                is_active=True,
            )
        )
        created += 1
    await session.flush()
    if created:
        logger.info("Seeded %d default grid operators for org %s", created, org_id)
    return created


class NatagareService:
    def __init__(self, repo: NatagareRepository):
        self.repo = repo

    async def list_natagare(
        self, actor: Principal, *, org_id: int | None = None, active_only: bool = False
    ) -> list[NatagareResponse]:
        require_permission(actor.role, Permission.NATAGARE_VIEW)
        rows = await self.repo.list_for_org(resolve_org_id(actor, org_id), active_only=active_only)
        return [NatagareResponse.model_validate(n) for n in rows]

    async def get(self, actor: Principal, natagare_id: int, org_id: int | None = None) -> NatagareResponse:
        require_permission(actor.role, Permission.NATAGARE_VIEW)
        return NatagareResponse.model_validate(await self._get_owned(actor, natagare_id, org_id))

    async def create(self, actor: Principal, data: NatagareCreate, org_id: int | None = None) -> NatagareResponse:
        require_permission(actor.role, Permission.NATAGARE_CREATE)
        org_id = resolve_org_id(actor, org_id)
        if await self.repo.get_by_name(org_id, data.name):
            raise ConflictError("En nätägare med detta namn finns redan")
        natagare = await self.repo.add(
            Natagare(
                org_id=org_id,
                name=data.name,
                day_rate_sek_kw=Decimal(str(data.day_rate_sek_kw)),
                night_rate_sek_kw=Decimal(str(data.night_rate_sek_kw)),
                day_start_hour=data.day_start_hour,
                day_end_hour=data.day_end_hour,
                is_default=False,
            )
        )
        return NatagareResponse.model_validate(natagare)

    async def update(
        self, actor: Principal, natagare_id: int, data: NatagareUpdate, org_id: int | None = None
    ) -> NatagareResponse:
        require_permission(actor.role, Permission.NATAGARE_EDIT)
        natagare = await self._get_owned(actor, natagare_id, org_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes and changes["name"] != natagare.name:
            if await self.repo.get_by_name(natagare.org_id, changes["name"]):
                raise ConflictError("En nätägare med detta namn finns redan")
        for field, value in changes.items():
            if field in ("day_rate_sek_kw", "night_rate_sek_kw"):
                value = Decimal(str(value))
            setattr(natagare, field, value)
        return NatagareResponse.model_validate(await self.repo.save(natagare))

    async def delete(self, actor: Principal, natagare_id: int, org_id: int | None = None) -> None:
        require_permission(actor.role, Permission.NATAGARE_DELETE)
        natagare = await self._get_owned(actor, natagare_id, org_id)
        if natagare.is_default:
            raise DomainValidationError("Standardnätägare kan inte tas bort")
        if await self.repo.is_in_use(natagare.id):
            raise DomainValidationError("Nätägaren används i kalkyler och kan inte tas bort")
        await self.repo.delete(natagare)

    async def _get_owned(self, actor: Principal, natagare_id: int, org_id: int | None) -> Natagare:
        natagare = await self.repo.get_in_org(natagare_id, resolve_org_id(actor, org_id))
        if not natagare:
            raise NotFoundError("Nätägaren hittades inte")
        return natagare
