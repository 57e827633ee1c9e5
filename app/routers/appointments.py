"""Appointments router - the caller's own appointments and their GoHighLevel feed.

Every endpoint is scoped to the authenticated user; another user's
appointment is reported as not found.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, get_ghl_client
from app.db.enums import AppointmentStatus
from app.db.models import User
from app.schemas.appointment import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentRead,
    AppointmentUpdate,
    CrmAppointmentListResponse,
)
from app.services import appointment_service, ghl_appointment_service
from app.services.ghl_client import GoHighLevelClient
from app.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


# =============================================================================
# GoHighLevel Feed
# =============================================================================

@router.get("/ghl", response_model=CrmAppointmentListResponse)
async def list_ghl_appointments(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: GoHighLevelClient | None = Depends(get_ghl_client),
):
    """
    GoHighLevel appointments the caller may see.

    Always succeeds: CRM outages or an unlinked GHL account produce an
    empty list rather than an error.
    """
    return await ghl_appointment_service.get_crm_appointments_for_user(
        db, user, directory=client, source=client
    )


# =============================================================================
# Local Appointments
# =============================================================================

@router.post("", response_model=AppointmentRead, status_code=201)
def create_appointment(
    data: AppointmentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Book an appointment for the caller."""
    appointment = appointment_service.create_appointment(db, user.id, data.model_dump())
    return AppointmentRead.model_validate(appointment)


@router.get("", response_model=AppointmentListResponse)
def list_appointments(
    status: AppointmentStatus | None = None,
    pagination: PaginationParams = Depends(get_pagination),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's appointments."""
    appointments, total = appointment_service.list_appointments(
        db, user.id, pagination, status=status
    )
    return AppointmentListResponse(
        items=[AppointmentRead.model_validate(a) for a in appointments],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
    )


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get one of the caller's appointments."""
    appointment = appointment_service.get_appointment(db, appointment_id, user.id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return AppointmentRead.model_validate(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentRead)
def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update one of the caller's appointments."""
    appointment = appointment_service.get_appointment(db, appointment_id, user.id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    changes = data.model_dump(exclude_unset=True)
    appointment = appointment_service.update_appointment(db, appointment, changes)
    return AppointmentRead.model_validate(appointment)


@router.delete("/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's appointments."""
    if not appointment_service.delete_appointment(db, appointment_id, user.id):
        raise HTTPException(status_code=404, detail="Appointment not found")
    return None
