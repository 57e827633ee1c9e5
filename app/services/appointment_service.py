"""Appointment service - locally stored appointments, scoped to their owner."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.enums import AppointmentStatus
from app.db.models import Appointment
from app.utils.pagination import PaginationParams, paginate_query

# Nullable columns a PATCH may clear
CLEARABLE_FIELDS = {"customer_email", "ghl_appointment_id", "notes"}


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def create_appointment(db: Session, user_id: UUID, data: dict[str, Any]) -> Appointment:
    """Create an appointment owned by `user_id`."""
    appointment = Appointment(
        user_id=user_id,
        **{key: _enum_value(value) for key, value in data.items()},
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def list_appointments(
    db: Session,
    user_id: UUID,
    pagination: PaginationParams,
    status: AppointmentStatus | None = None,
) -> tuple[list[Appointment], int]:
    """List a user's appointments, soonest first."""
    query = db.query(Appointment).filter(Appointment.user_id == user_id)
    if status:
        query = query.filter(Appointment.status == status.value)
    query = query.order_by(Appointment.scheduled_at.asc())
    return paginate_query(query, pagination)


def get_appointment(db: Session, appointment_id: UUID, user_id: UUID) -> Appointment | None:
    """Get an appointment if it belongs to `user_id`."""
    return db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.user_id == user_id,
    ).first()


def update_appointment(db: Session, appointment: Appointment, changes: dict[str, Any]) -> Appointment:
    """Apply a partial update. Null only clears optional fields; it is ignored elsewhere."""
    for key, value in changes.items():
        if value is None and key not in CLEARABLE_FIELDS:
            continue
        setattr(appointment, key, _enum_value(value))
    db.commit()
    db.refresh(appointment)
    return appointment


def delete_appointment(db: Session, appointment_id: UUID, user_id: UUID) -> bool:
    """
    Delete an appointment owned by `user_id`.

    Returns:
        True if deleted, False if not found (or owned by someone else)
    """
    appointment = get_appointment(db, appointment_id, user_id)
    if not appointment:
        return False
    db.delete(appointment)
    db.commit()
    return True
