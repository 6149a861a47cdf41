"""
Auth endpoints - login, current user, password reset.
Challenge: Brute-force protection and no account enumeration.
Design: Thin controller; AuthService holds the rules and raises domain errors.
"""

from fastapi import APIRouter

from kalkyla.core.audit import SecurityEventType, log_security_event
from kalkyla.core.dependencies import ClientIp, CurrentUser
from kalkyla.core.security import validate_password_strength
from kalkyla.db.repositories.password_reset_repository import PasswordResetRepository
from kalkyla.db.repositories.user_repository import UserRepository
from kalkyla.db.session import DbSession
from kalkyla.schemas.auth import (
    LoginRequest,
    MeResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    ResetTokenStatus,
    TokenResponse,
)
from kalkyla.schemas.common import MessageResponse
from kalkyla.services.auth_service import AuthService, me_response

router = APIRouter()


def _get_auth_service(session: DbSession) -> AuthService:
    return AuthService(UserRepository(session), PasswordResetRepository(session))


@router.post("/login", response_model=TokenResponse)
async def login(session: DbSession, data: LoginRequest, client_ip: ClientIp):
    """Exchange credentials for a bearer token."""
    return await _get_auth_service(session).login(data.email, data.password, client_ip)


@router.get("/me", response_model=MeResponse)
async def me(session: DbSession, user: CurrentUser):
    db_user = await UserRepository(session).get_by_id(user.id)
    return me_response(db_user)


@router.post("/logout", response_model=MessageResponse)
async def logout(user: CurrentUser):
    """Tokens are stateless; the client discards its copy."""
    log_security_event(SecurityEventType.LOGOUT, user_id=user.id, email=user.email, org_id=user.org_id)
    return MessageResponse(message="Utloggad")


@router.post("/password-reset/request", response_model=MessageResponse)
async def request_password_reset(session: DbSession, data: PasswordResetRequest):
    """Same answer whether or not the email exists."""
    await _get_auth_service(session).request_password_reset(data.email)
    return MessageResponse(message="Om e-postadressen finns skickas en återställningslänk")


@router.get("/password-reset/validate", response_model=ResetTokenStatus)
async def validate_reset_token(session: DbSession, token: str = ""):
    return await _get_auth_service(session).validate_reset_token(token)


@router.post("/password-reset/confirm", response_model=MessageResponse)
async def confirm_password_reset(session: DbSession, data: PasswordResetConfirm):
    await _get_auth_service(session).reset_password(data.token, data.password)
    return MessageResponse(message="Lösenordet har uppdaterats")


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def password_strength(data: PasswordStrengthRequest):
    errors = validate_password_strength(data.password)
    return PasswordStrengthResponse(valid=not errors, errors=errors)
