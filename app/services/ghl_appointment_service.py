"""GoHighLevel appointment feed for the current user.

Ties together identity resolution (which GHL user is this?), fetching the
raw appointments, and the ownership rules in appointment_visibility.

The read path never raises for CRM trouble: an unresolvable identity or a
failed fetch degrades to an empty list. The admin linking helpers at the
bottom do raise GhlApiError, so an admin sees that GHL is down.
"""
import logging
from typing import Any, Protocol

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.structured_logging import build_log_context
from app.db.enums import GhlLinkStatus, Role
from app.db.models import User
from app.schemas.appointment import CrmAppointmentListResponse, CrmAppointmentUser
from app.schemas.user import GhlLinkResult, GhlSyncResponse, GhlUserListResponse, GhlUserRead
from app.services import user_service
from app.services.appointment_visibility import RequestingUser, resolve_visible_appointments
from app.services.ghl_client import GhlApiError
from app.services.ghl_user_lookup import (
    find_user_by_id,
    find_user_by_name,
    ghl_user_field,
    ghl_user_name,
)

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    async def list_users(self) -> list[dict[str, Any]]: ...


class AppointmentSource(Protocol):
    async def fetch_for_user(self, ghl_user_id: str) -> list[dict[str, Any]]: ...

    async def fetch_all(self) -> list[dict[str, Any]]: ...


def empty_response() -> CrmAppointmentListResponse:
    return CrmAppointmentListResponse(appointments=[], total=0)


def _match_ghl_user(
    user: User,
    ghl_users: list[dict[str, Any]],
    overrides: dict[str, str],
) -> dict[str, Any] | None:
    """Name search (username when the name is blank), then an email match."""
    match = find_user_by_name(
        ghl_users,
        user.name or user.username,
        overrides=overrides,
        aliases=(user.username,),
        email=user.email,
    )
    if match is None or not match.get("id"):
        return None
    return match


async def resolve_ghl_user_id(
    db: Session,
    user: User,
    directory: UserDirectory,
    overrides: dict[str, str] | None = None,
) -> str | None:
    """Work out the GHL user id for `user`, caching a newly found one.

    1. A stored id is used only if it still exists in the GHL user list.
    2. Otherwise the user's display name, then email, is matched against that list.
    3. A match is written to the user row (idempotent).
    4. No match, or the user list cannot be fetched: None.
    """
    log_context = build_log_context(user_id=str(user.id), role=user.role)
    overrides = settings.ghl_user_name_overrides if overrides is None else overrides

    try:
        ghl_users = await directory.list_users()
    except GhlApiError as exc:
        logger.error("Could not list GHL users: %s", exc, extra=log_context)
        return None

    if user.ghl_user_id:
        if find_user_by_id(ghl_users, user.ghl_user_id) is not None:
            return user.ghl_user_id
        logger.warning(
            "Stored GHL user id not found in GHL, searching by name",
            extra={**log_context, "ghl_user_id": user.ghl_user_id},
        )

    match = _match_ghl_user(user, ghl_users, overrides)
    if match is None:
        logger.warning("Could not determine GHL user id", extra=log_context)
        return None

    ghl_user_id = str(match["id"])
    if ghl_user_id == user.ghl_user_id:
        return ghl_user_id

    if not user_service.set_ghl_user_id(db, user.id, ghl_user_id):
        # Held by another user; trusting a fuzzy match here would show
        # that user's appointments to this one
        return None

    logger.info("Cached GHL user id", extra={**log_context, "ghl_user_id": ghl_user_id})
    return ghl_user_id


async def fetch_raw_appointments(source: AppointmentSource, ghl_user_id: str) -> list[dict[str, Any]]:
    """Per-user fetch, falling back to the whole location, then to nothing."""
    try:
        return await source.fetch_for_user(ghl_user_id)
    except GhlApiError as exc:
        logger.warning(
            "Per-user GHL appointment fetch failed, falling back to all appointments: %s",
            exc,
            extra={"ghl_user_id": ghl_user_id},
        )

    try:
        return await source.fetch_all()
    except GhlApiError as exc:
        logger.error("GHL appointment fallback fetch failed: %s", exc)
        return []


async def get_crm_appointments_for_user(
    db: Session,
    user: User,
    directory: UserDirectory | None,
    source: AppointmentSource | None,
) -> CrmAppointmentListResponse:
    """Visible, normalized GHL appointments for `user`.

    `directory`/`source` are None when GHL credentials are not configured.
    """
    log_context = build_log_context(user_id=str(user.id), role=user.role)

    if directory is None or source is None:
        logger.warning("GHL credentials not configured - returning empty response", extra=log_context)
        return empty_response()

    ghl_user_id = await resolve_ghl_user_id(db, user, directory)
    if not ghl_user_id:
        return empty_response()

    records = await fetch_raw_appointments(source, ghl_user_id)

    requester = RequestingUser(
        id=str(user.id),
        role=Role(user.role) if Role.has_value(user.role) else Role.SALES,
        ghl_user_id=ghl_user_id,
        ghl_team_id=user.ghl_team_id,
    )
    appointments = resolve_visible_appointments(records, requester)

    logger.info(
        "Filtered %d of %d GHL appointments",
        len(appointments),
        len(records),
        extra={**log_context, "ghl_user_id": ghl_user_id},
    )
    return CrmAppointmentListResponse(
        appointments=appointments,
        total=len(appointments),
        user=CrmAppointmentUser(id=str(user.id), name=user.name, role=user.role),
    )


# =============================================================================
# Admin linking
# =============================================================================

def _link_user(
    db: Session,
    user: User,
    ghl_users: list[dict[str, Any]],
    overrides: dict[str, str],
) -> GhlLinkResult:
    previous = user.ghl_user_id
    ghl_user_id = previous

    if previous and find_user_by_id(ghl_users, previous) is not None:
        status = GhlLinkStatus.VERIFIED
    else:
        match = _match_ghl_user(user, ghl_users, overrides)
        if match is None:
            status = GhlLinkStatus.NOT_FOUND
        elif user_service.set_ghl_user_id(db, user.id, str(match["id"])):
            ghl_user_id = str(match["id"])
            status = GhlLinkStatus.UPDATED if previous else GhlLinkStatus.ASSIGNED
        else:
            status = GhlLinkStatus.CONFLICT

    return GhlLinkResult(
        user_id=user.id,
        username=user.username,
        name=user.name,
        previous_ghl_user_id=previous,
        ghl_user_id=ghl_user_id,
        status=status,
    )


async def link_ghl_user(
    db: Session,
    user: User,
    directory: UserDirectory,
    overrides: dict[str, str] | None = None,
) -> GhlLinkResult:
    """Verify or look up one user's GHL id.

    Raises:
        GhlApiError: GHL user list could not be fetched
    """
    overrides = settings.ghl_user_name_overrides if overrides is None else overrides
    ghl_users = await directory.list_users()
    result = _link_user(db, user, ghl_users, overrides)
    logger.info(
        "GHL link %s",
        result.status.value,
        extra=build_log_context(user_id=str(user.id), ghl_user_id=result.ghl_user_id),
    )
    return result


async def sync_ghl_user_ids(
    db: Session,
    directory: UserDirectory,
    overrides: dict[str, str] | None = None,
) -> GhlSyncResponse:
    """Verify, repair or assign the GHL id of every user from one user list.

    Raises:
        GhlApiError: GHL user list could not be fetched
    """
    overrides = settings.ghl_user_name_overrides if overrides is None else overrides
    ghl_users = await directory.list_users()

    results = [_link_user(db, user, ghl_users, overrides) for user in user_service.list_users(db)]
    counts = {status: 0 for status in GhlLinkStatus}
    for result in results:
        counts[result.status] += 1

    logger.info(
        "GHL sync finished",
        extra={"total": len(results), **{s.value.lower(): n for s, n in counts.items()}},
    )
    return GhlSyncResponse(total=len(results), counts=counts, users=results)


async def list_ghl_users(directory: UserDirectory) -> GhlUserListResponse:
    """GHL users of the location, for linking by hand.

    Raises:
        GhlApiError: GHL user list could not be fetched
    """
    users = [
        GhlUserRead(
            id=str(ghl_user["id"]),
            first_name=ghl_user_field(ghl_user, "firstName"),
            last_name=ghl_user_field(ghl_user, "lastName"),
            email=ghl_user_field(ghl_user, "email"),
            full_name=ghl_user_name(ghl_user),
        )
        for ghl_user in await directory.list_users()
        if isinstance(ghl_user, dict) and ghl_user.get("id")
    ]
    return GhlUserListResponse(count=len(users), users=users)
