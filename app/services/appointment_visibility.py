"""Appointment ownership rules for CRM appointment records.

Decides which GoHighLevel appointments a user may see and normalizes the
survivors into CrmAppointmentRead. Everything here is pure: no I/O, no
database, input records are never modified.

Precedence, per record:
- ADMIN sees everything.
- SURVEYOR sees a record explicitly assigned to them or to their team.
  When the record has no explicit assignee, the contact's assignee is
  used instead (team match still applies).
- Any other role sees a record explicitly assigned to them, or, when there
  is no explicit assignee, whose contact is assigned to them.

An explicit appointment assignee always wins over the contact assignee, so
a contact worked by several people never exposes one person's
appointments to another.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from app.db.enums import CrmAppointmentStatus, Role, SourceChannel
from app.schemas.appointment import CrmAppointmentRead

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown Customer"

# Raw CRM fields passed through untouched on each normalized appointment
PASSTHROUGH_FIELDS = {
    "contact": "contact",
    "calendar_id": "calendarId",
    "calendar_service_id": "calendarServiceId",
    "start_time": "startTime",
    "end_time": "endTime",
    "selected_timezone": "selectedTimezone",
    "is_recurring": "isRecurring",
    "location_id": "locationId",
}


@dataclass(frozen=True)
class RequestingUser:
    """Identity the visibility rules are evaluated against."""

    id: str
    role: Role
    ghl_user_id: str | None = None
    ghl_team_id: str | None = None


@dataclass(frozen=True)
class CrmAppointmentRecord:
    """The assignment fields of one CRM appointment, plus the raw payload."""

    id: str
    assigned_user_id: str | None
    team_id: str | None
    contact_assigned_user_id: str | None
    payload: Mapping[str, Any] = field(repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "CrmAppointmentRecord | None":
        """Parse a raw record; returns None when it has no identifier."""
        if not isinstance(payload, Mapping):
            return None
        record_id = _present(payload.get("id"))
        if record_id is None:
            return None
        contact = payload.get("contact")
        contact_assignee = (
            _present(contact.get("assignedTo")) if isinstance(contact, Mapping) else None
        )
        return cls(
            id=record_id,
            assigned_user_id=_present(payload.get("userId")) or _present(payload.get("assignedTo")),
            team_id=_present(payload.get("teamId")),
            contact_assigned_user_id=contact_assignee,
            payload=payload,
        )


def _present(value: Any) -> str | None:
    """Normalize an optional CRM id: None and empty strings count as absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _matches(candidate: str | None, ghl_user_id: str | None) -> bool:
    return candidate is not None and candidate == ghl_user_id


def _team_matches(record: CrmAppointmentRecord, user: RequestingUser) -> bool:
    return (
        record.team_id is not None
        and user.ghl_team_id is not None
        and record.team_id == user.ghl_team_id
    )


# =============================================================================
# Visibility rules (one per role)
# =============================================================================

def _admin_can_see(record: CrmAppointmentRecord, user: RequestingUser) -> bool:
    return True


def _surveyor_can_see(record: CrmAppointmentRecord, user: RequestingUser) -> bool:
    if record.assigned_user_id is not None:
        return _matches(record.assigned_user_id, user.ghl_user_id) or _team_matches(record, user)
    return _matches(record.contact_assigned_user_id, user.ghl_user_id) or _team_matches(record, user)


def _assignee_can_see(record: CrmAppointmentRecord, user: RequestingUser) -> bool:
    if record.assigned_user_id is not None:
        return _matches(record.assigned_user_id, user.ghl_user_id)
    return _matches(record.contact_assigned_user_id, user.ghl_user_id)


VisibilityRule = Callable[[CrmAppointmentRecord, RequestingUser], bool]

VISIBILITY_RULES: dict[Role, VisibilityRule] = {
    Role.ADMIN: _admin_can_see,
    Role.SURVEYOR: _surveyor_can_see,
    Role.SALES: _assignee_can_see,
}


def visibility_rule(role: Role) -> VisibilityRule:
    """Rule for a role; roles without a dedicated rule see only their own."""
    return VISIBILITY_RULES.get(role, _assignee_can_see)


def is_visible(record: CrmAppointmentRecord, user: RequestingUser) -> bool:
    return visibility_rule(user.role)(record, user)


# =============================================================================
# Normalization
# =============================================================================

def map_crm_status(status: str | None) -> CrmAppointmentStatus:
    """Map a free-form CRM status onto scheduled/completed/cancelled.

    Substring match on the lower-cased value; anything unrecognized is
    treated as scheduled. Mapping an already-mapped value is a no-op.
    """
    value = (status or "").lower()
    if "completed" in value or "done" in value:
        return CrmAppointmentStatus.COMPLETED
    if "cancelled" in value:
        return CrmAppointmentStatus.CANCELLED
    return CrmAppointmentStatus.SCHEDULED


def _parse_timestamp(value: Any) -> datetime | None:
    """CRM timestamps arrive as ISO strings or epoch milliseconds."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _text(*values: Any) -> str:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def customer_name(payload: Mapping[str, Any]) -> str:
    """Contact name, then contact email, then record title, then a placeholder."""
    contact = payload.get("contact")
    contact = contact if isinstance(contact, Mapping) else {}
    full_name = " ".join(
        part for part in (_text(contact.get("firstName")), _text(contact.get("lastName"))) if part
    )
    return _text(full_name, contact.get("name"), contact.get("email"), payload.get("title")) or UNKNOWN_CUSTOMER


def normalize_appointment(record: CrmAppointmentRecord, user: RequestingUser) -> CrmAppointmentRead:
    payload = record.payload
    contact = payload.get("contact")
    contact = contact if isinstance(contact, Mapping) else {}
    status = payload.get("status") or payload.get("appoinmentStatus") or payload.get("appointmentStatus")

    return CrmAppointmentRead(
        id=record.id,
        customer_name=customer_name(payload),
        customer_phone=_text(contact.get("phone")),
        customer_email=_text(contact.get("email")),
        address=_text(payload.get("location"), payload.get("address")),
        scheduled_at=_parse_timestamp(payload.get("startTime")),
        end_time=_parse_timestamp(payload.get("endTime")),
        status=map_crm_status(status if isinstance(status, str) else None),
        notes=_text(payload.get("notes"), payload.get("calendarNotes")),
        source_channel=SourceChannel.MANUAL.value.lower(),
        ghl_appointment_id=record.id,
        user_id=user.id,
        ghl_data={name: payload.get(key) for name, key in PASSTHROUGH_FIELDS.items()},
    )


# =============================================================================
# Entry point
# =============================================================================

def resolve_visible_appointments(
    records: Iterable[Any],
    user: RequestingUser,
) -> list[CrmAppointmentRead]:
    """Filter raw CRM records down to what `user` may see, normalized.

    Records without an id are dropped; repeated ids are emitted once.
    """
    rule = visibility_rule(user.role)
    seen: set[str] = set()
    visible: list[CrmAppointmentRead] = []
    dropped = 0

    for payload in records:
        record = CrmAppointmentRecord.from_payload(payload)
        if record is None:
            dropped += 1
            continue
        if record.id in seen:
            continue
        seen.add(record.id)

        allowed = rule(record, user)
        logger.debug(
            "Appointment %s visible=%s (assigned=%s team=%s contact=%s)",
            record.id,
            allowed,
            record.assigned_user_id,
            record.team_id,
            record.contact_assigned_user_id,
        )
        if allowed:
            visible.append(normalize_appointment(record, user))

    if dropped:
        logger.info("Dropped %d CRM appointments without an id", dropped)
    return visible
