"""User service - user operations and token revocation."""

import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.db.enums import Role, UserStatus
from app.db.models import User
from app.utils.normalization import normalize_email, normalize_name, normalize_username

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    """Get user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get user by username (case-insensitive)."""
    return db.query(User).filter(User.username == normalize_username(username)).first()


def get_user_by_ghl_user_id(db: Session, ghl_user_id: str) -> User | None:
    """Get the user linked to a GoHighLevel user id."""
    return db.query(User).filter(User.ghl_user_id == ghl_user_id).first()


def list_users(db: Session, role: Role | None = None) -> list[User]:
    """List users, optionally filtered by role."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    return query.order_by(User.username).all()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    name: str | None = None,
    role: Role = Role.SURVEYOR,
    ghl_user_id: str | None = None,
    ghl_team_id: str | None = None,
) -> User:
    """
    Create a user with a hashed password.

    Raises:
        ValueError: If the username or email is already taken
    """
    username = normalize_username(username)
    email = normalize_email(email)
    if not username or not email:
        raise ValueError("Username and email are required")

    existing = db.query(User).filter(
        or_(User.username == username, User.email == email)
    ).first()
    if existing:
        raise ValueError("Username or email already exists")

    user = User(
        username=username,
        email=email,
        name=normalize_name(name),
        password_hash=hash_password(password),
        role=role.value,
        status=UserStatus.ACTIVE.value,
        ghl_user_id=ghl_user_id or None,
        ghl_team_id=ghl_team_id or None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(
    db: Session,
    user: User,
    name: str | None = None,
    role: Role | None = None,
    status: UserStatus | None = None,
    ghl_user_id: str | None = None,
    ghl_team_id: str | None = None,
) -> User:
    """
    Update admin-managed user fields. None leaves a field unchanged.

    Changing role or status revokes existing tokens.

    Raises:
        ValueError: If the GHL user id is already linked to another user
    """
    revoke = False
    if name is not None:
        user.name = normalize_name(name)
    if role is not None and role.value != user.role:
        user.role = role.value
        revoke = True
    if status is not None and status.value != user.status:
        user.status = status.value
        revoke = True
    if ghl_user_id is not None:
        user.ghl_user_id = ghl_user_id or None
    if ghl_team_id is not None:
        user.ghl_team_id = ghl_team_id or None
    if revoke:
        user.token_version += 1

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError("GHL user id is already linked to another user")
    db.refresh(user)
    return user


def set_ghl_user_id(db: Session, user_id: UUID, ghl_user_id: str) -> bool:
    """
    Cache a discovered GoHighLevel user id on the user row.

    Idempotent: writing the same id again is a no-op in effect.

    Returns:
        True if stored, False if the user is gone or another user already
        holds that GHL id
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return False
    if user.ghl_user_id == ghl_user_id:
        return True

    user.ghl_user_id = ghl_user_id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            "GHL user id already linked to another user",
            extra={"user_id": str(user_id), "ghl_user_id": ghl_user_id},
        )
        return False
    return True


def revoke_all_sessions(db: Session, user_id: UUID) -> bool:
    """
    Revoke all tokens for a user by bumping token_version.

    Existing tokens with old version will fail validation.

    Returns:
        True if user found and tokens revoked, False if user not found
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return False

    user.token_version += 1
    db.commit()
    return True
