"""Enum definitions for application constants."""

from app.db.enums.appointments import (
    AppointmentStatus,
    CrmAppointmentStatus,
    DEFAULT_APPOINTMENT_STATUS,
    SourceChannel,
)
from app.db.enums.auth import GhlLinkStatus, Role, UserStatus

__all__ = [
    "AppointmentStatus",
    "CrmAppointmentStatus",
    "DEFAULT_APPOINTMENT_STATUS",
    "GhlLinkStatus",
    "Role",
    "SourceChannel",
    "UserStatus",
]
