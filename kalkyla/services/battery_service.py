"""
Battery service - per-org catalogue of brands and configurations.
Challenge: Keep price lists tenant-private and protect quotes that reference a config.
Design: Brands with configs cannot be deleted; configs used in calculations are deactivated instead.
"""

import logging
from decimal import Decimal

from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import ConflictError, DomainValidationError, NotFoundError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.db.models.battery import BatteryBrand, BatteryConfig
from kalkyla.db.repositories.battery_repository import BatteryBrandRepository, BatteryConfigRepository
from kalkyla.schemas.battery import (
    BatteryBrandCreate,
    BatteryBrandResponse,
    BatteryBrandUpdate,
    BatteryConfigCreate,
    BatteryConfigResponse,
    BatteryConfigUpdate,
)
from kalkyla.services.scope import resolve_org_id

logger = logging.getLogger(__name__)

DECIMAL_FIELDS = {
    "capacity_kwh",
    "max_discharge_kw",
    "max_charge_kw",
    "charge_efficiency",
    "discharge_efficiency",
    "degradation_per_year",
    "cost_price",
}


def _to_column(field: str, value):
    return Decimal(str(value)) if field in DECIMAL_FIELDS and value is not None else value


class BatteryService:
    def __init__(self, brand_repo: BatteryBrandRepository, config_repo: BatteryConfigRepository):
        self.brand_repo = brand_repo
        self.config_repo = config_repo

    # Brands

    async def list_brands(self, actor: Principal, org_id: int | None = None) -> list[BatteryBrandResponse]:
        require_permission(actor.role, Permission.BATTERY_VIEW)
        org_id = resolve_org_id(actor, org_id)
        counts = await self.brand_repo.config_counts(org_id)
        return [
            BatteryBrandResponse.model_validate(b).model_copy(update={"config_count": counts.get(b.id, 0)})
            for b in await self.brand_repo.list_for_org(org_id)
        ]

    async def create_brand(
        self, actor: Principal, data: BatteryBrandCreate, org_id: int | None = None
    ) -> BatteryBrandResponse:
        require_permission(actor.role, Permission.BATTERY_CREATE)
        org_id = resolve_org_id(actor, org_id)
        if await self.brand_repo.get_by_name(org_id, data.name):
            raise ConflictError("Ett märke med detta namn finns redan")
        brand = await self.brand_repo.add(BatteryBrand(org_id=org_id, name=data.name, logo_url=data.logo_url or None))
        return BatteryBrandResponse.model_validate(brand)

    async def update_brand(
        self, actor: Principal, brand_id: int, data: BatteryBrandUpdate, org_id: int | None = None
    ) -> BatteryBrandResponse:
        require_permission(actor.role, Permission.BATTERY_EDIT)
        brand = await self._get_brand(actor, brand_id, org_id)
        if data.name and data.name != brand.name:
            if await self.brand_repo.get_by_name(brand.org_id, data.name):
                raise ConflictError("Ett märke med detta namn finns redan")
            brand.name = data.name
        if "logo_url" in data.model_fields_set:
            brand.logo_url = data.logo_url or None
        brand = await self.brand_repo.save(brand)
        response = BatteryBrandResponse.model_validate(brand)
        return response.model_copy(update={"config_count": await self.brand_repo.count_configs(brand.id)})

    async def delete_brand(self, actor: Principal, brand_id: int, org_id: int | None = None) -> None:
        require_permission(actor.role, Permission.BATTERY_DELETE)
        brand = await self._get_brand(actor, brand_id, org_id)
        config_count = await self.brand_repo.count_configs(brand.id)
        if config_count:
            raise DomainValidationError(
                f"Märket har {config_count} konfigurationer. Ta bort dem först.", config_count=config_count
            )
        await self.brand_repo.delete(brand)

    # Configs

    async def list_configs(
        self, actor: Principal, *, brand_id: int | None = None, org_id: int | None = None
    ) -> list[BatteryConfigResponse]:
        require_permission(actor.role, Permission.BATTERY_VIEW)
        configs = await self.config_repo.list_for_org(resolve_org_id(actor, org_id), brand_id=brand_id)
        return [BatteryConfigResponse.model_validate(c) for c in configs]

    async def get_config(self, actor: Principal, config_id: int, org_id: int | None = None) -> BatteryConfigResponse:
        require_permission(actor.role, Permission.BATTERY_VIEW)
        return BatteryConfigResponse.model_validate(await self._get_config(actor, config_id, org_id))

    async def create_config(
        self, actor: Principal, data: BatteryConfigCreate, org_id: int | None = None
    ) -> BatteryConfigResponse:
        require_permission(actor.role, Permission.BATTERY_CREATE)
        org_id = resolve_org_id(actor, org_id)
        if not await self.brand_repo.get_in_org(data.brand_id, org_id):
            raise NotFoundError("Märket hittades inte")
        if await self.config_repo.get_by_brand_and_name(org_id, data.brand_id, data.name):
            raise ConflictError("En konfiguration med detta namn finns redan för märket")
        values = {field: _to_column(field, value) for field, value in data.model_dump().items()}
        config = await self.config_repo.add(BatteryConfig(org_id=org_id, is_active=True, **values))
        return BatteryConfigResponse.model_validate(config)

    async def update_config(
        self, actor: Principal, config_id: int, data: BatteryConfigUpdate, org_id: int | None = None
    ) -> BatteryConfigResponse:
        require_permission(actor.role, Permission.BATTERY_EDIT)
        config = await self._get_config(actor, config_id, org_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        brand_id = changes.get("brand_id", config.brand_id)
        if brand_id != config.brand_id and not await self.brand_repo.get_in_org(brand_id, config.org_id):
            raise NotFoundError("Märket hittades inte")
        name = changes.get("name", config.name)
        if (brand_id, name) != (config.brand_id, config.name):
            if await self.config_repo.get_by_brand_and_name(config.org_id, brand_id, name):
                raise ConflictError("En konfiguration med detta namn finns redan för märket")

        for field, value in changes.items():
            setattr(config, field, _to_column(field, value))
        config = await self.config_repo.save(config)
        await self.config_repo.session.refresh(config, attribute_names=["brand"])
        return BatteryConfigResponse.model_validate(config)

    async def delete_config(self, actor: Principal, config_id: int, org_id: int | None = None) -> bool:
        """Returns False when the config was only deactivated because quotes reference it."""
        require_permission(actor.role, Permission.BATTERY_DELETE)
        config = await self._get_config(actor, config_id, org_id)
        if await self.config_repo.is_in_use(config.id):
            config.is_active = False
            await self.config_repo.save(config)
            logger.info("Battery config %s deactivated instead of deleted (in use)", config.id)
            return False
        await self.config_repo.delete(config)
        return True

    async def _get_brand(self, actor: Principal, brand_id: int, org_id: int | None) -> BatteryBrand:
        brand = await self.brand_repo.get_in_org(brand_id, resolve_org_id(actor, org_id))
        if not brand:
            raise NotFoundError("Märket hittades inte")
        return brand

    async def _get_config(self, actor: Principal, config_id: int, org_id: int | None) -> BatteryConfig:
        config = await self.config_repo.get_in_org(config_id, resolve_org_id(actor, org_id))
        if not config:
            raise NotFoundError("Batterikonfigurationen hittades inte")
        return config
