"""Grid operator endpoints - effect tariffs per organization."""

from fastapi import APIRouter, Query, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.natagare_repository import NatagareRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.natagare import NatagareCreate, NatagareResponse, NatagareUpdate
from kalkyla.services.natagare_service import NatagareService

router = APIRouter()


def _get_natagare_service(session: DbSession) -> NatagareService:
    return NatagareService(NatagareRepository(session))


@router.get("", response_model=list[NatagareResponse])
async def list_natagare(
    session: DbSession,
    user: CurrentUser,
    active_only: bool = Query(False),
    org_id: int | None = Query(None),
):
    return await _get_natagare_service(session).list_natagare(user, org_id=org_id, active_only=active_only)


@router.post("", response_model=NatagareResponse, status_code=status.HTTP_201_CREATED)
async def create_natagare(
    session: DbSession, data: NatagareCreate, user: CurrentUser, org_id: int | None = Query(None)
):
    return await _get_natagare_service(session).create(user, data, org_id)


@router.get("/{natagare_id}", response_model=NatagareResponse)
async def get_natagare(session: DbSession, natagare_id: int, user: CurrentUser, org_id: int | None = Query(None)):
    return await _get_natagare_service(session).get(user, natagare_id, org_id)


@router.put("/{natagare_id}", response_model=NatagareResponse)
async def update_natagare(
    session: DbSession,
    natagare_id: int,
    data: NatagareUpdate,
    user: CurrentUser,
    org_id: int | None = Query(None),
):
    return await _get_natagare_service(session).update(user, natagare_id, data, org_id)


@router.delete("/{natagare_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_natagare(
    session: DbSession, natagare_id: int, user: CurrentUser, org_id: int | None = Query(None)
):
    """Default operators and operators used by calculations cannot be removed."""
    await _get_natagare_service(session).delete(user, natagare_id, org_id)
