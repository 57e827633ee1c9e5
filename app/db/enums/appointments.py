"""Appointment enums."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """
    Stored appointment lifecycle status.

    Flow: scheduled → completed
              ↘ cancelled
              ↘ no_show
    """

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class SourceChannel(str, Enum):
    """Where an appointment was booked."""

    MANUAL = "MANUAL"
    AI = "AI"
    OTHER = "OTHER"


class CrmAppointmentStatus(str, Enum):
    """Closed status set exposed for CRM-sourced appointments."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Default appointment status
DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.SCHEDULED
