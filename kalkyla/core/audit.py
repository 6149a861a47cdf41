"""
Security audit log.
Challenge: Traceable record of auth and admin events without a separate store.
Design: One JSON line per event on the "kalkyla.security" logger; ship it with the rest of the logs.
"""

import enum
import json
import logging
from typing import Any

from kalkyla.core.timeutils import utcnow

logger = logging.getLogger("kalkyla.security")


class SecurityEventType(str, enum.Enum):
    LOGIN_SUCCESS = "auth.login.success"
    LOGIN_FAILED = "auth.login.failed"
    LOGIN_RATE_LIMITED = "auth.login.rate_limited"
    LOGOUT = "auth.logout"

    PASSWORD_RESET_REQUESTED = "auth.password_reset.requested"
    PASSWORD_RESET_SUCCESS = "auth.password_reset.success"
    PASSWORD_RESET_FAILED = "auth.password_reset.failed"
    PASSWORD_RESET_RATE_LIMITED = "auth.password_reset.rate_limited"
    PASSWORD_CHANGED = "auth.password.changed"

    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DEACTIVATED = "user.deactivated"
    USER_ROLE_CHANGED = "user.role_changed"

    ORG_CREATED = "org.created"
    ORG_UPDATED = "org.updated"

    SHARE_PASSWORD_FAILED = "share.password.failed"
    SHARE_PASSWORD_RATE_LIMITED = "share.password.rate_limited"

    API_RATE_LIMITED = "api.rate_limited"


def log_security_event(
    event_type: SecurityEventType,
    *,
    user_id: int | None = None,
    email: str | None = None,
    org_id: int | None = None,
    target_user_id: int | None = None,
    target_org_id: int | None = None,
    ip_hash: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Emit a security event. Failed and rate-limited events log at WARNING."""
    entry: dict[str, Any] = {"timestamp": utcnow().isoformat(), "type": event_type.value}
    for key, value in (
        ("userId", user_id),
        ("email", email),
        ("orgId", org_id),
        ("targetUserId", target_user_id),
        ("targetOrgId", target_org_id),
        ("ipHash", ip_hash),
        ("metadata", metadata),
    ):
        if value is not None:
            entry[key] = value

    level = logging.INFO
    if "failed" in event_type.value or "rate_limited" in event_type.value:
        level = logging.WARNING
    logger.log(level, "[SECURITY] %s", json.dumps(entry, default=str))
    return entry
