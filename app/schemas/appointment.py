"""Appointment schemas - Pydantic models for appointments API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.db.enums import AppointmentStatus, CrmAppointmentStatus, SourceChannel


# =============================================================================
# Local Appointments
# =============================================================================

class AppointmentCreate(BaseModel):
    """Schema for booking an appointment. The owner is always the caller."""
    scheduled_at: datetime
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=50)
    customer_email: EmailStr | None = None
    address: str = Field(..., min_length=1, max_length=500)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    ghl_appointment_id: str | None = Field(None, max_length=100)
    notes: str | None = None
    source_channel: SourceChannel = SourceChannel.MANUAL


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment. Only provided fields change."""
    scheduled_at: datetime | None = None
    customer_name: str | None = Field(None, min_length=1, max_length=255)
    customer_phone: str | None = Field(None, min_length=1, max_length=50)
    customer_email: EmailStr | None = None
    address: str | None = Field(None, min_length=1, max_length=500)
    status: AppointmentStatus | None = None
    ghl_appointment_id: str | None = Field(None, max_length=100)
    notes: str | None = None
    source_channel: SourceChannel | None = None


class AppointmentRead(BaseModel):
    """Schema for reading a stored appointment."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    scheduled_at: datetime
    customer_name: str
    customer_phone: str
    customer_email: str | None
    address: str
    status: AppointmentStatus
    source_channel: SourceChannel
    ghl_appointment_id: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class AppointmentListResponse(BaseModel):
    """One page of stored appointments for the current user."""
    items: list[AppointmentRead]
    total: int
    page: int
    per_page: int


# =============================================================================
# CRM (GoHighLevel) Appointments
# =============================================================================

class CrmAppointmentRead(BaseModel):
    """A GoHighLevel appointment normalized for the app."""
    id: str
    customer_name: str
    customer_phone: str = ""
    customer_email: str = ""
    address: str = ""
    scheduled_at: datetime | None = None
    end_time: datetime | None = None
    status: CrmAppointmentStatus
    notes: str = ""
    source_channel: str = "manual"
    ghl_appointment_id: str
    user_id: str
    ghl_data: dict[str, Any] = Field(default_factory=dict)


class CrmAppointmentUser(BaseModel):
    """Who the CRM feed was resolved for."""
    id: str
    name: str | None
    role: str


class CrmAppointmentListResponse(BaseModel):
    """Visible CRM appointments for the current user."""
    appointments: list[CrmAppointmentRead]
    total: int
    user: CrmAppointmentUser | None = None
