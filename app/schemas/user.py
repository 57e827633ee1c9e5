"""User-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.db.enums import GhlLinkStatus, Role, UserStatus


class UserRead(BaseModel):
    """Response schema for reading a user."""

    id: UUID
    username: str
    email: str
    name: str | None
    role: Role
    status: UserStatus
    ghl_user_id: str | None
    ghl_team_id: str | None
    last_login_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Request schema for an admin creating a user."""

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=2, max_length=100)
    role: Role = Role.SURVEYOR
    ghl_user_id: str | None = Field(None, max_length=100)
    ghl_team_id: str | None = Field(None, max_length=100)


class UserUpdate(BaseModel):
    """Request schema for an admin updating a user. Omitted fields stay as they are."""

    name: str | None = Field(None, min_length=2, max_length=100)
    role: Role | None = None
    status: UserStatus | None = None
    ghl_user_id: str | None = Field(None, max_length=100)
    ghl_team_id: str | None = Field(None, max_length=100)


class GhlUserRead(BaseModel):
    """A GoHighLevel user an admin can link to."""

    id: str
    first_name: str
    last_name: str
    email: str
    full_name: str


class GhlUserListResponse(BaseModel):
    count: int
    users: list[GhlUserRead]


class GhlLinkResult(BaseModel):
    """Result of linking one user to GoHighLevel."""

    user_id: UUID
    username: str
    name: str | None
    previous_ghl_user_id: str | None
    ghl_user_id: str | None
    status: GhlLinkStatus


class GhlSyncResponse(BaseModel):
    """Bulk link results, with a count per status."""

    total: int
    counts: dict[GhlLinkStatus, int]
    users: list[GhlLinkResult]
