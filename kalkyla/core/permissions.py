"""
Role-based access control.
Challenge: Three roles with overlapping capabilities across tenants.
Design: Static role -> permission table; services call require_permission before acting.
"""

import enum

from kalkyla.core.errors import PermissionDeniedError
from kalkyla.db.models.enums import UserRole


class Permission(str, enum.Enum):
    # Organizations
    ORG_CREATE = "org:create"
    ORG_DELETE = "org:delete"
    ORG_VIEW_ALL = "org:view_all"
    ORG_EDIT_ANY = "org:edit_any"
    ORG_EDIT_OWN = "org:edit_own"

    # Users
    USER_CREATE_ORG_ADMIN = "user:create_org_admin"
    USER_CREATE_CLOSER = "user:create_closer"
    USER_EDIT = "user:edit"
    USER_DEACTIVATE = "user:deactivate"
    USER_VIEW_ALL = "user:view_all"
    USER_VIEW_ORG = "user:view_org"

    # Batteries
    BATTERY_CREATE = "battery:create"
    BATTERY_EDIT = "battery:edit"
    BATTERY_DELETE = "battery:delete"
    BATTERY_VIEW = "battery:view"

    # Grid operators
    NATAGARE_CREATE = "natagare:create"
    NATAGARE_EDIT = "natagare:edit"
    NATAGARE_DELETE = "natagare:delete"
    NATAGARE_VIEW = "natagare:view"

    # Electricity prices
    ELPRICES_VIEW = "elprices:view"
    ELPRICES_MANAGE = "elprices:manage"

    # Calculations
    CALCULATION_CREATE = "calculation:create"
    CALCULATION_VIEW = "calculation:view"
    CALCULATION_VIEW_ALL = "calculation:view_all"
    CALCULATION_VIEW_ORG = "calculation:view_org"
    CALCULATION_EDIT = "calculation:edit"
    CALCULATION_DELETE = "calculation:delete"
    CALCULATION_FINALIZE = "calculation:finalize"


ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.SUPER_ADMIN: frozenset(Permission),
    UserRole.ORG_ADMIN: frozenset(
        {
            Permission.ORG_EDIT_OWN,
            Permission.USER_CREATE_CLOSER,
            Permission.USER_EDIT,
            Permission.USER_DEACTIVATE,
            Permission.USER_VIEW_ORG,
            Permission.BATTERY_CREATE,
            Permission.BATTERY_EDIT,
            Permission.BATTERY_DELETE,
            Permission.BATTERY_VIEW,
            Permission.NATAGARE_CREATE,
            Permission.NATAGARE_EDIT,
            Permission.NATAGARE_DELETE,
            Permission.NATAGARE_VIEW,
            Permission.ELPRICES_VIEW,
            Permission.CALCULATION_CREATE,
            Permission.CALCULATION_VIEW,
            Permission.CALCULATION_VIEW_ORG,
            Permission.CALCULATION_EDIT,
            Permission.CALCULATION_DELETE,
            Permission.CALCULATION_FINALIZE,
        }
    ),
    UserRole.CLOSER: frozenset(
        {
            Permission.BATTERY_VIEW,
            Permission.NATAGARE_VIEW,
            Permission.ELPRICES_VIEW,
            Permission.CALCULATION_CREATE,
            Permission.CALCULATION_VIEW,
            Permission.CALCULATION_EDIT,
            Permission.CALCULATION_DELETE,
            Permission.CALCULATION_FINALIZE,
        }
    ),
}


def has_permission(role: UserRole, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def require_permission(role: UserRole, permission: Permission) -> None:
    """Raise PermissionDeniedError unless the role holds the permission."""
    if not has_permission(role, permission):
        raise PermissionDeniedError(f"Missing permission: {permission.value}")


def can_access_org(role: UserRole, user_org_id: int | None, target_org_id: int | None) -> bool:
    """Super admins reach every tenant; everyone else only their own."""
    if role == UserRole.SUPER_ADMIN:
        return True
    return user_org_id is not None and user_org_id == target_org_id


def get_permissions_for_role(role: UserRole) -> list[Permission]:
    return sorted(ROLE_PERMISSIONS.get(role, frozenset()), key=lambda p: p.value)
