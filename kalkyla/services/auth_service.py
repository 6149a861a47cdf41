"""
Auth service - credential login and password reset.
Challenge: Resist brute force and account enumeration while staying simple.
Design: Per-email rate limits, uniform error messages, single-use expiring reset tokens,
audit events for every outcome.
"""

import logging
from datetime import timedelta

from kalkyla.config import get_settings
from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.errors import AuthenticationError, DomainValidationError, RateLimitedError
from kalkyla.core.permissions import get_permissions_for_role
from kalkyla.core.rate_limit import (
    check_login_rate_limit,
    check_password_reset_rate_limit,
    reset_login_rate_limit,
)
from kalkyla.core.security import (
    create_access_token,
    generate_reset_token,
    hash_ip,
    hash_password,
    verify_password,
)
from kalkyla.core.timeutils import as_utc, utcnow
from kalkyla.db.models.password_reset import PasswordResetToken
from kalkyla.db.models.user import User
from kalkyla.db.repositories.password_reset_repository import PasswordResetRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import run_after_commit
from kalkyla.integrations import n8n
from kalkyla.queue.tasks import dispatch_webhook
from kalkyla.schemas.auth import MeResponse, ResetTokenStatus, TokenResponse

logger = logging.getLogger(__name__)
settings = get_settings()

RESET_TOKEN_TTL = timedelta(hours=1)
INVALID_CREDENTIALS = "Felaktig e-post eller lösenord"


def me_response(user: User) -> MeResponse:
    return MeResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        org_id=user.org_id,
        org_slug=user.organization.slug if user.organization else None,
        permissions=[p.value for p in get_permissions_for_role(user.role)],
    )


class AuthService:
    def __init__(self, user_repo: UserRepository, reset_repo: PasswordResetRepository):
        self.user_repo = user_repo
        self.reset_repo = reset_repo

    async def login(self, email: str, password: str, client_ip: str | None = None) -> TokenResponse:
        email = email.lower()
        ip_hash = hash_ip(client_ip) if client_ip else None

        limit = check_login_rate_limit(email)
        if not limit.success:
            log_security_event(SecurityEventType.LOGIN_RATE_LIMITED, email=email, ip_hash=ip_hash)
            raise RateLimitedError(
                f"För många inloggningsförsök. Försök igen om {limit.minutes_until_reset} minuter."
            )

        user = await self.user_repo.get_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            log_security_event(
                SecurityEventType.LOGIN_FAILED,
                email=email,
                ip_hash=ip_hash,
                metadata={"reason": "inactive" if user and not user.is_active else "invalid_credentials"},
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        reset_login_rate_limit(email)
        log_security_event(SecurityEventType.LOGIN_SUCCESS, user_id=user.id, email=email, org_id=user.org_id)

        token = create_access_token(
            user.id,
            extra={
                "role": user.role.value,
                "org_id": user.org_id,
                "org_slug": user.organization.slug if user.organization else None,
            },
        )
        return TokenResponse(access_token=token, user=me_response(user))

    async def request_password_reset(self, email: str) -> None:
        """Always succeeds from the caller's point of view; unknown emails are silently ignored."""
        email = email.lower()
        limit = check_password_reset_rate_limit(email)
        if not limit.success:
            log_security_event(SecurityEventType.PASSWORD_RESET_RATE_LIMITED, email=email)
            raise RateLimitedError(
                f"För många förfrågningar. Försök igen om {limit.minutes_until_reset} minuter."
            )

        user = await self.user_repo.get_by_email(email)
        if not user or not user.is_active:
            logger.info("Password reset requested for unknown or inactive account")
            return

        await self.reset_repo.delete_for_user(user.id)
        token = generate_reset_token()
        await self.reset_repo.add(
            PasswordResetToken(token=token, user_id=user.id, expires_at=utcnow() + RESET_TOKEN_TTL)
        )
        log_security_event(SecurityEventType.PASSWORD_RESET_REQUESTED, user_id=user.id, email=email)

        run_after_commit(
            self.reset_repo.session,
            dispatch_webhook,
            n8n.PASSWORD_RESET,
            {
                "email": user.email,
                "name": user.name,
                "resetUrl": f"{settings.app_url}/reset-password?token={token}",
                "expiresInMinutes": int(RESET_TOKEN_TTL.total_seconds() // 60),
            },
        )

    async def validate_reset_token(self, token: str) -> ResetTokenStatus:
        """Check a token without consuming it."""
        record = await self.reset_repo.get_by_token(token) if token else None
        if record is None:
            return ResetTokenStatus(valid=False, reason="invalid")
        if record.used_at is not None:
            return ResetTokenStatus(valid=False, reason="used")
        if as_utc(record.expires_at) < utcnow():
            return ResetTokenStatus(valid=False, reason="expired")
        return ResetTokenStatus(valid=True)

    async def reset_password(self, token: str, password: str) -> None:
        record = await self.reset_repo.get_by_token(token) if token else None
        if record is None:
            log_security_event(SecurityEventType.PASSWORD_RESET_FAILED, metadata={"reason": "invalid_token"})
            raise DomainValidationError("Ogiltig eller utgången länk")
        if as_utc(record.expires_at) < utcnow():
            await self.reset_repo.delete(record)
            # Persist the cleanup; the request session rolls back on the error below
            await self.reset_repo.session.commit()
            log_security_event(
                SecurityEventType.PASSWORD_RESET_FAILED, user_id=record.user_id, metadata={"reason": "expired"}
            )
            raise DomainValidationError("Länken har gått ut. Begär en ny återställningslänk.")
        if record.used_at is not None:
            log_security_event(
                SecurityEventType.PASSWORD_RESET_FAILED, user_id=record.user_id, metadata={"reason": "used"}
            )
            raise DomainValidationError("Länken har redan använts")

        user = await self.user_repo.get_by_id(record.user_id)
        if user is None:
            raise DomainValidationError("Ogiltig eller utgången länk")
        user.hashed_password = hash_password(password)
        record.used_at = utcnow()
        await self.user_repo.save(user)
        log_security_event(SecurityEventType.PASSWORD_RESET_SUCCESS, user_id=user.id, email=user.email)
