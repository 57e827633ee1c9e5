"""User administration router (ADMIN only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_ghl_client, require_roles
from app.db.enums import GhlLinkStatus, Role
from app.schemas.user import (
    GhlLinkResult,
    GhlSyncResponse,
    GhlUserListResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)
from app.services import ghl_appointment_service, user_service
from app.services.ghl_client import GhlApiError, GoHighLevelClient

router = APIRouter(dependencies=[Depends(require_roles([Role.ADMIN]))])


def _require_ghl_client(client: GoHighLevelClient | None) -> GoHighLevelClient:
    if client is None:
        raise HTTPException(status_code=503, detail="GoHighLevel credentials not configured")
    return client


@router.get("", response_model=list[UserRead])
def list_users(
    role: Role | None = None,
    db: Session = Depends(get_db),
):
    """List users, optionally filtered by role."""
    return [UserRead.model_validate(u) for u in user_service.list_users(db, role=role)]


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
):
    """Create a user."""
    try:
        user = user_service.create_user(
            db,
            username=data.username,
            email=data.email,
            password=data.password,
            name=data.name,
            role=data.role,
            ghl_user_id=data.ghl_user_id,
            ghl_team_id=data.ghl_team_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Session = Depends(get_db),
):
    """Update role, status, name or GHL ids. Role/status changes revoke the user's tokens."""
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        user = user_service.update_user(
            db,
            user,
            name=data.name,
            role=data.role,
            status=data.status,
            ghl_user_id=data.ghl_user_id,
            ghl_team_id=data.ghl_team_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserRead.model_validate(user)


# =============================================================================
# GoHighLevel Linking
# =============================================================================

@router.get("/ghl-users", response_model=GhlUserListResponse)
async def list_ghl_users(
    client: GoHighLevelClient | None = Depends(get_ghl_client),
):
    """GoHighLevel users of the location, for linking by hand via PATCH."""
    try:
        return await ghl_appointment_service.list_ghl_users(_require_ghl_client(client))
    except GhlApiError:
        raise HTTPException(status_code=502, detail="GoHighLevel request failed")


@router.post("/ghl-sync", response_model=GhlSyncResponse)
async def sync_ghl_user_ids(
    db: Session = Depends(get_db),
    client: GoHighLevelClient | None = Depends(get_ghl_client),
):
    """Verify every user's GHL id and look up the missing or stale ones."""
    try:
        return await ghl_appointment_service.sync_ghl_user_ids(db, _require_ghl_client(client))
    except GhlApiError:
        raise HTTPException(status_code=502, detail="GoHighLevel request failed")


@router.post("/{user_id}/assign-ghl-id", response_model=GhlLinkResult)
async def assign_ghl_user_id(
    user_id: UUID,
    db: Session = Depends(get_db),
    client: GoHighLevelClient | None = Depends(get_ghl_client),
):
    """Look up one user's GHL id by name or email and save it."""
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        result = await ghl_appointment_service.link_ghl_user(db, user, _require_ghl_client(client))
    except GhlApiError:
        raise HTTPException(status_code=502, detail="GoHighLevel request failed")

    if result.status == GhlLinkStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="No matching GoHighLevel user found")
    if result.status == GhlLinkStatus.CONFLICT:
        raise HTTPException(status_code=409, detail="GoHighLevel user already linked to another user")
    return result
