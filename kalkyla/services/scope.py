"""Tenant resolution for org-scoped resources."""

from kalkyla.core.dependencies import Principal
from kalkyla.core.errors import PermissionDeniedError


def resolve_org_id(actor: Principal, requested_org_id: int | None = None) -> int:
    """Super admins may act in any org they name; everyone else is pinned to their own."""
    if actor.is_super_admin and requested_org_id is not None:
        return requested_org_id
    if actor.org_id is None:
        raise PermissionDeniedError("Du måste tillhöra en organisation")
    if requested_org_id is not None and requested_org_id != actor.org_id:
        raise PermissionDeniedError("Åtkomst nekad")
    return actor.org_id
