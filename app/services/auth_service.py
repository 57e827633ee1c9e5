"""Authentication service - credential checks and token issuance."""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.security import create_access_token, verify_password
from app.db.models import User
from app.services import user_service

logger = logging.getLogger(__name__)


def authenticate(db: Session, username: str, password: str) -> User | None:
    """
    Check username/password.

    Returns the user on success; None for unknown users, wrong passwords,
    and accounts that are not ACTIVE (the caller cannot tell which).
    Updates last_login_at on success.
    """
    user = user_service.get_user_by_username(db, username)
    if not user or not user.is_active:
        return None

    if not verify_password(password, user.password_hash):
        logger.info("Failed login", extra={"user_id": str(user.id)})
        return None

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def issue_token(user: User) -> str:
    """Create a bearer token for an authenticated user."""
    return create_access_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )
