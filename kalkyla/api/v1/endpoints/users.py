"""
User endpoints - administration of org admins and closers.
Challenge: Role hierarchy and tenant isolation.
Design: Thin controller; UserService holds every rule.
"""

from fastapi import APIRouter, status

from kalkyla.core.dependencies import CurrentUser
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.user import UserCreate, UserResponse, UserUpdate
from kalkyla.services.user_service import UserService

router = APIRouter()


def _get_user_service(session: DbSession) -> UserService:
    return UserService(UserRepository(session), OrganizationRepository(session))


@router.get("", response_model=list[UserResponse])
async def list_users(session: DbSession, user: CurrentUser):
    """Super admins see everyone; org admins their own org."""
    return await _get_user_service(session).list_users(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(session: DbSession, data: UserCreate, user: CurrentUser):
    return await _get_user_service(session).create(user, data)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(session: DbSession, user_id: int, user: CurrentUser):
    return await _get_user_service(session).get(user, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(session: DbSession, user_id: int, data: UserUpdate, user: CurrentUser):
    return await _get_user_service(session).update(user, user_id, data)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(session: DbSession, user_id: int, user: CurrentUser):
    return await _get_user_service(session).deactivate(user, user_id)
