"""
User service - administration of org admins and closers.
Challenge: Role hierarchy (super admin > org admin > closer) with tenant isolation.
Design: Every rule is checked here so endpoints stay thin; violations raise domain errors.
"""

import logging

from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import ConflictError, DomainValidationError, NotFoundError, PermissionDeniedError
from kalkyla.core.permissions import Permission, require_permission
from kalkyla.core.security import hash_password
from kalkyla.db.models.enums import UserRole
from kalkyla.db.models.user import User
from kalkyla.db.repositories.organization_repository import OrganizationRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserService:
    def __init__(self, user_repo: UserRepository, org_repo: OrganizationRepository):
        self.user_repo = user_repo
        self.org_repo = org_repo

    async def create(self, actor: Principal, data: UserCreate) -> UserResponse:
        if data.role == UserRole.SUPER_ADMIN:
            raise PermissionDeniedError("Superadmin kan inte skapas här")
        if data.role == UserRole.ORG_ADMIN:
            require_permission(actor.role, Permission.USER_CREATE_ORG_ADMIN)
        else:
            require_permission(actor.role, Permission.USER_CREATE_CLOSER)

        org_id = data.org_id
        if not actor.is_super_admin:
            # Org admins create closers in their own org only
            if org_id is not None and org_id != actor.org_id:
                raise PermissionDeniedError("Du kan bara skapa användare i din egen organisation")
            org_id = actor.org_id
        if org_id is None or await self.org_repo.get_by_id(org_id) is None:
            raise NotFoundError("Organisationen hittades inte")

        email = data.email.lower()
        if await self.user_repo.get_by_email(email):
            raise ConflictError("E-postadressen används redan")

        user = await self.user_repo.add(
            User(
                email=email,
                name=data.name,
                hashed_password=hash_password(data.password),
                role=data.role,
                org_id=org_id,
                is_active=True,
            )
        )
        log_security_event(
            SecurityEventType.USER_CREATED,
            user_id=actor.id,
            target_user_id=user.id,
            target_org_id=org_id,
            metadata={"role": user.role.value},
        )
        return UserResponse.model_validate(user)

    async def update(self, actor: Principal, user_id: int, data: UserUpdate) -> UserResponse:
        require_permission(actor.role, Permission.USER_EDIT)
        user = await self._get_manageable(actor, user_id)
        if user.role == UserRole.SUPER_ADMIN:
            raise PermissionDeniedError("Superadmin kan inte redigeras")
        if data.role == UserRole.SUPER_ADMIN:
            raise PermissionDeniedError("Kan inte uppgradera till superadmin")
        if data.role == UserRole.ORG_ADMIN and not actor.can(Permission.USER_CREATE_ORG_ADMIN):
            raise PermissionDeniedError("Du kan inte tilldela rollen organisationsadmin")

        if data.email and data.email.lower() != user.email:
            if await self.user_repo.get_by_email(data.email):
                raise ConflictError("E-postadressen används redan")
            user.email = data.email.lower()
        if data.name:
            user.name = data.name
        if data.is_active is not None:
            if user.id == actor.id and not data.is_active:
                raise DomainValidationError("Du kan inte inaktivera dig själv")
            user.is_active = data.is_active
        if data.password and len(data.password) >= MIN_PASSWORD_LENGTH:
            user.hashed_password = hash_password(data.password)
            log_security_event(SecurityEventType.PASSWORD_CHANGED, user_id=actor.id, target_user_id=user.id)
        if data.role and data.role != user.role:
            log_security_event(
                SecurityEventType.USER_ROLE_CHANGED,
                user_id=actor.id,
                target_user_id=user.id,
                metadata={"from": user.role.value, "to": data.role.value},
            )
            user.role = data.role

        user = await self.user_repo.save(user)
        log_security_event(SecurityEventType.USER_UPDATED, user_id=actor.id, target_user_id=user.id)
        return UserResponse.model_validate(user)

    async def deactivate(self, actor: Principal, user_id: int) -> UserResponse:
        require_permission(actor.role, Permission.USER_DEACTIVATE)
        user = await self._get_manageable(actor, user_id)
        if user.role == UserRole.SUPER_ADMIN:
            raise PermissionDeniedError("Superadmin kan inte inaktiveras")
        if user.id == actor.id:
            raise DomainValidationError("Du kan inte inaktivera dig själv")
        user.is_active = False
        user = await self.user_repo.save(user)
        log_security_event(SecurityEventType.USER_DEACTIVATED, user_id=actor.id, target_user_id=user.id)
        return UserResponse.model_validate(user)

    async def list_users(self, actor: Principal) -> list[UserResponse]:
        if actor.can(Permission.USER_VIEW_ALL):
            users = await self.user_repo.list_users()
        elif actor.can(Permission.USER_VIEW_ORG) and actor.org_id is not None:
            users = await self.user_repo.list_users(org_id=actor.org_id)
        else:
            raise PermissionDeniedError("Åtkomst nekad")
        return [UserResponse.model_validate(u) for u in users]

    async def get(self, actor: Principal, user_id: int) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("Användaren hittades inte")
        if actor.is_super_admin:
            pass
        elif actor.role == UserRole.ORG_ADMIN:
            if user.org_id != actor.org_id:
                raise NotFoundError("Användaren hittades inte")
        elif user.id != actor.id:
            raise NotFoundError("Användaren hittades inte")
        return UserResponse.model_validate(user)

    async def _get_manageable(self, actor: Principal, user_id: int) -> User:
        """Target user, hidden as not-found when it lives in another tenant."""
        user = await self.user_repo.get_by_id(user_id)
        if not user or (not actor.is_super_admin and user.org_id != actor.org_id):
            raise NotFoundError("Användaren hittades inte")
        return user
