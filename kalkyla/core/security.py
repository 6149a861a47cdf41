"""
Security: password hashing, JWT sessions and random tokens.
Challenge: Secure auth, no plain-text passwords, unguessable public identifiers.
"""

import hashlib
import re
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from kalkyla.config import get_settings

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

# nanoid default alphabet (URL-safe)
SHARE_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"
SHARE_CODE_LENGTH = 21


def hash_password(password: str) -> str:
    """One-way hash for storage. Never store plain passwords."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison for login."""
    return pwd_context.verify(plain, hashed)


def validate_password_strength(password: str) -> list[str]:
    """Return the unmet rules for an admin-chosen password (empty list = strong)."""
    errors = []
    if len(password) < 12:
        errors.append("Lösenordet måste vara minst 12 tecken")
    if not re.search(r"[A-Z]", password):
        errors.append("Lösenordet måste innehålla minst en versal")
    if not re.search(r"[a-z]", password):
        errors.append("Lösenordet måste innehålla minst en gemen")
    if not re.search(r"[0-9]", password):
        errors.append("Lösenordet måste innehålla minst en siffra")
    return errors


def create_access_token(subject: str | int, extra: dict[str, Any] | None = None) -> str:
    """Create JWT for authenticated user. Subject is the user id; extra carries role and tenant."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    to_encode = {"sub": str(subject), "exp": expire}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT. Returns payload or None if invalid."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def generate_share_code(length: int = SHARE_CODE_LENGTH) -> str:
    """URL-safe random code for public calculation links (126 bits at 21 chars)."""
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(length))


def generate_reset_token() -> str:
    """64 hex chars (32 random bytes)."""
    return secrets.token_hex(32)


def hash_ip(ip_address: str) -> str:
    """Truncated sha256 of a client IP; raw IPs are never stored."""
    return hashlib.sha256(ip_address.encode("utf-8")).hexdigest()[:16]
