"""
FastAPI dependencies - authentication and the acting principal.
Challenge: Reusable auth, consistent error responses.
Design: The JWT only identifies the user; role and tenant are re-read from the DB on
each request so deactivation and role changes apply immediately.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from kalkyla.core.permissions import Permission, has_permission
from kalkyla.core.security import decode_access_token
from kalkyla.db.models.enums import UserRole
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import DbSession

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by services."""

    id: int
    email: str
    name: str
    role: UserRole
    org_id: int | None
    org_slug: str | None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def can(self, permission: Permission) -> bool:
        return has_permission(self.role, permission)


async def get_current_user(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """Resolve JWT to the acting user. Raises 401 if missing, invalid or inactive."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = await UserRepository(session).get_by_id(int(payload["sub"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return Principal(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        org_id=user.org_id,
        org_slug=user.organization.slug if user.organization else None,
    )


def get_client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


CurrentUser = Annotated[Principal, Depends(get_current_user)]
ClientIp = Annotated[str | None, Depends(get_client_ip)]
