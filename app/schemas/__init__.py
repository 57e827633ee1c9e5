"""Pydantic schemas for API request/response models."""

from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentRead,
    AppointmentUpdate,
    CrmAppointmentListResponse,
    CrmAppointmentRead,
    CrmAppointmentUser,
)
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import (
    GhlLinkResult,
    GhlSyncResponse,
    GhlUserListResponse,
    GhlUserRead,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "AppointmentCreate",
    "AppointmentListResponse",
    "AppointmentRead",
    "AppointmentUpdate",
    "CrmAppointmentListResponse",
    "CrmAppointmentRead",
    "CrmAppointmentUser",
    "GhlLinkResult",
    "GhlSyncResponse",
    "GhlUserListResponse",
    "GhlUserRead",
    "LoginRequest",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
