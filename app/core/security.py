"""Security utilities for bearer access tokens and password hashing."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from app.core.config import settings


# =============================================================================
# Access Token (JWT in Authorization header)
# =============================================================================

def create_access_token(
    user_id: UUID,
    role: str,
    token_version: int,
) -> str:
    """
    Create signed access JWT.

    Always signs with current secret (JWT_SECRET).
    Token contains user identity, role, and revocation version.
    """
    payload = {
        "sub": str(user_id),
        "role": role,
        "token_version": token_version,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """
    Decode and verify access JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


def decode_unverified_claims(token: str) -> dict:
    """
    Read claims from a third-party JWT without verifying its signature.

    Used for API keys whose payload carries configuration (e.g. the GHL
    location id). Never use for authentication.

    Raises:
        jwt.DecodeError: If the token is not a JWT
    """
    return jwt.decode(token, options={"verify_signature": False})


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or password over bcrypt's 72-byte limit
        return False
