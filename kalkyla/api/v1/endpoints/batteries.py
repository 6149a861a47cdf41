"""
Battery catalogue endpoints - brands and configurations per organization.
Super admins pass ?org_id= to work inside a specific tenant.
"""

from fastapi import APIRouter, Query, Response, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.battery_repository import BatteryBrandRepository, BatteryConfigRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.battery import (
    BatteryBrandCreate,
    BatteryBrandResponse,
    BatteryBrandUpdate,
    BatteryConfigCreate,
    BatteryConfigResponse,
    BatteryConfigUpdate,
)
from kalkyla.services.battery_service import BatteryService

router = APIRouter()


def _get_battery_service(session: DbSession) -> BatteryService:
    return BatteryService(BatteryBrandRepository(session), BatteryConfigRepository(session))


# Brands


@router.get("/brands", response_model=list[BatteryBrandResponse])
async def list_brands(session: DbSession, user: CurrentUser, org_id: int | None = Query(None)):
    return await _get_battery_service(session).list_brands(user, org_id)


@router.post("/brands", response_model=BatteryBrandResponse, status_code=status.HTTP_201_CREATED)
async def create_brand(
    session: DbSession, data: BatteryBrandCreate, user: CurrentUser, org_id: int | None = Query(None)
):
    return await _get_battery_service(session).create_brand(user, data, org_id)


@router.put("/brands/{brand_id}", response_model=BatteryBrandResponse)
async def update_brand(
    session: DbSession,
    brand_id: int,
    data: BatteryBrandUpdate,
    user: CurrentUser,
    org_id: int | None = Query(None),
):
    return await _get_battery_service(session).update_brand(user, brand_id, data, org_id)


@router.delete("/brands/{brand_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_brand(session: DbSession, brand_id: int, user: CurrentUser, org_id: int | None = Query(None)):
    """Refused with 422 while the brand still has configurations."""
    await _get_battery_service(session).delete_brand(user, brand_id, org_id)


# Configs


@router.get("/configs", response_model=list[BatteryConfigResponse])
async def list_configs(
    session: DbSession,
    user: CurrentUser,
    brand_id: int | None = Query(None),
    org_id: int | None = Query(None),
):
    """Active configurations, optionally for one brand."""
    return await _get_battery_service(session).list_configs(user, brand_id=brand_id, org_id=org_id)


@router.post("/configs", response_model=BatteryConfigResponse, status_code=status.HTTP_201_CREATED)
async def create_config(
    session: DbSession, data: BatteryConfigCreate, user: CurrentUser, org_id: int | None = Query(None)
):
    return await _get_battery_service(session).create_config(user, data, org_id)


@router.get("/configs/{config_id}", response_model=BatteryConfigResponse)
async def get_config(session: DbSession, config_id: int, user: CurrentUser, org_id: int | None = Query(None)):
    return await _get_battery_service(session).get_config(user, config_id, org_id)


@router.put("/configs/{config_id}", response_model=BatteryConfigResponse)
async def update_config(
    session: DbSession,
    config_id: int,
    data: BatteryConfigUpdate,
    user: CurrentUser,
    org_id: int | None = Query(None),
):
    return await _get_battery_service(session).update_config(user, config_id, data, org_id)


@router.delete("/configs/{config_id}")
async def delete_config(session: DbSession, config_id: int, user: CurrentUser, org_id: int | None = Query(None)):
    """204 when removed; 200 with deactivated=true when quotes still reference it."""
    deleted = await _get_battery_service(session).delete_config(user, config_id, org_id)
    if deleted:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return {"deleted": False, "deactivated": True}
