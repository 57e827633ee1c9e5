"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Index, Integer, String, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import Role, UserStatus

if TYPE_CHECKING:
    from app.db.models import Appointment


class User(Base):
    """
    Application user.

    Authenticates with username + password (bcrypt hash stored).
    `ghl_user_id` links the account to its GoHighLevel user; it is filled
    in lazily the first time the CRM appointment feed resolves it.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_role", "role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=Role.SURVEYOR.value, server_default=text("'SURVEYOR'"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=UserStatus.ACTIVE.value, server_default=text("'ACTIVE'"), nullable=False
    )

    # GoHighLevel identity
    ghl_user_id: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    ghl_team_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    token_version: Mapped[int] = mapped_column(
        Integer, default=1, server_default=text("1"), nullable=False
    )
    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    appointments: Mapped[list["Appointment"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return self.name or self.username

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
