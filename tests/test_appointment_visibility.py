"""Tests for CRM appointment ownership rules and normalization."""

import copy
from datetime import datetime, timezone

import pytest

from app.db.enums import CrmAppointmentStatus, Role
from app.services.appointment_visibility import (
    UNKNOWN_CUSTOMER,
    CrmAppointmentRecord,
    RequestingUser,
    customer_name,
    is_visible,
    map_crm_status,
    resolve_visible_appointments,
)


def _ids(appointments) -> set[str]:
    return {a.id for a in appointments}


@pytest.fixture
def records():
    """Explicit assignee, team match, other team, contact-only assignee."""
    return [
        {"id": "A", "userId": "U1"},
        {"id": "B", "userId": "U2", "teamId": "T1"},
        {"id": "C", "userId": "U2", "teamId": "T2"},
        {"id": "D", "userId": None, "contact": {"assignedTo": "U1"}},
    ]


def surveyor(**overrides) -> RequestingUser:
    fields = {"id": "local-1", "role": Role.SURVEYOR, "ghl_user_id": "U1", "ghl_team_id": "T1"}
    fields.update(overrides)
    return RequestingUser(**fields)


# =============================================================================
# Visibility
# =============================================================================

def test_surveyor_sees_own_team_and_contact_assignments(records):
    visible = resolve_visible_appointments(records, surveyor())
    assert _ids(visible) == {"A", "B", "D"}


def test_admin_sees_everything(records):
    admin = RequestingUser(id="admin-1", role=Role.ADMIN)
    visible = resolve_visible_appointments(records, admin)
    assert _ids(visible) == {"A", "B", "C", "D"}


def test_admin_sees_records_without_any_assignment():
    admin = RequestingUser(id="admin-1", role=Role.ADMIN, ghl_user_id="X")
    visible = resolve_visible_appointments([{"id": "E"}], admin)
    assert _ids(visible) == {"E"}


def test_sales_sees_only_direct_or_contact_assignments(records):
    sales = RequestingUser(id="s-1", role=Role.SALES, ghl_user_id="U1", ghl_team_id="T1")
    visible = resolve_visible_appointments(records, sales)
    # Team assignment only counts for surveyors
    assert _ids(visible) == {"A", "D"}


def test_explicit_assignee_beats_contact_assignee():
    record = {"id": "X", "userId": "U2", "contact": {"assignedTo": "U1"}}
    for role in (Role.SURVEYOR, Role.SALES):
        user = RequestingUser(id="u", role=role, ghl_user_id="U1")
        assert resolve_visible_appointments([record], user) == []


def test_assigned_to_is_accepted_as_explicit_assignee():
    visible = resolve_visible_appointments(
        [{"id": "A", "assignedTo": "U1"}, {"id": "B", "assignedTo": "U9"}],
        surveyor(ghl_team_id=None),
    )
    assert _ids(visible) == {"A"}


def test_surveyor_team_match_applies_without_explicit_assignee():
    record = {"id": "T", "teamId": "T1", "contact": {"assignedTo": "U9"}}
    assert _ids(resolve_visible_appointments([record], surveyor())) == {"T"}


def test_missing_team_ids_never_match():
    record = {"id": "N", "userId": "U2", "teamId": None}
    assert resolve_visible_appointments([record], surveyor(ghl_team_id=None)) == []


def test_user_without_ghl_id_sees_nothing_unassigned():
    user = surveyor(ghl_user_id=None, ghl_team_id=None)
    visible = resolve_visible_appointments(
        [{"id": "A", "userId": None}, {"id": "B", "contact": {"assignedTo": None}}],
        user,
    )
    assert visible == []


def test_empty_string_assignee_counts_as_absent():
    record = {"id": "E", "userId": "", "contact": {"assignedTo": "U1"}}
    assert _ids(resolve_visible_appointments([record], surveyor(ghl_team_id=None))) == {"E"}


def test_title_and_notes_do_not_affect_visibility():
    record = {
        "id": "Z",
        "title": "U1 survey",
        "notes": "assigned to U1",
        "contact": {"assignedTo": "U7"},
    }
    assert resolve_visible_appointments([record], surveyor(ghl_team_id=None)) == []


@pytest.mark.parametrize("role", [Role.SURVEYOR, Role.SALES])
def test_other_users_record_without_team_is_hidden_for_non_admins(role):
    record = CrmAppointmentRecord.from_payload({"id": "R", "userId": "U2"})
    assert not is_visible(record, RequestingUser(id="u", role=role, ghl_user_id="U1"))


# =============================================================================
# Record handling
# =============================================================================

def test_records_without_id_are_dropped():
    admin = RequestingUser(id="admin-1", role=Role.ADMIN)
    visible = resolve_visible_appointments(
        [{"userId": "U1"}, {"id": ""}, {"id": None}, "not-a-record", {"id": "ok"}],
        admin,
    )
    assert _ids(visible) == {"ok"}


def test_duplicate_records_are_emitted_once():
    admin = RequestingUser(id="admin-1", role=Role.ADMIN)
    visible = resolve_visible_appointments([{"id": "A"}, {"id": "A"}, {"id": "B"}], admin)
    assert [a.id for a in visible] == ["A", "B"]


def test_input_records_are_not_modified(records):
    snapshot = copy.deepcopy(records)
    resolve_visible_appointments(records, surveyor())
    assert records == snapshot


def test_same_input_gives_same_output(records):
    user = surveyor()
    first = resolve_visible_appointments(records, user)
    second = resolve_visible_appointments(records, user)
    assert first == second


# =============================================================================
# Status mapping
# =============================================================================

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Completed", CrmAppointmentStatus.COMPLETED),
        ("COMPLETED", CrmAppointmentStatus.COMPLETED),
        ("job done", CrmAppointmentStatus.COMPLETED),
        ("Cancelled - rescheduled", CrmAppointmentStatus.CANCELLED),
        ("booked", CrmAppointmentStatus.SCHEDULED),
        ("confirmed", CrmAppointmentStatus.SCHEDULED),
        ("", CrmAppointmentStatus.SCHEDULED),
        (None, CrmAppointmentStatus.SCHEDULED),
    ],
)
def test_map_crm_status(raw, expected):
    assert map_crm_status(raw) == expected


@pytest.mark.parametrize("status", list(CrmAppointmentStatus))
def test_map_crm_status_is_idempotent(status):
    once = map_crm_status(status.value)
    assert once == status
    assert map_crm_status(once.value) == once


# =============================================================================
# Normalization
# =============================================================================

def test_normalized_appointment_fields():
    record = {
        "id": "apt-1",
        "userId": "U1",
        "status": "Job Done",
        "startTime": "2026-03-01T15:00:00Z",
        "endTime": 1772380800000,
        "location": "12 Sun Street",
        "notes": "Bring ladder",
        "calendarId": "cal-1",
        "contact": {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "phone": "+15551234",
            "email": "ada@example.com",
        },
    }
    [appointment] = resolve_visible_appointments([record], surveyor())

    assert appointment.id == "apt-1"
    assert appointment.ghl_appointment_id == "apt-1"
    assert appointment.user_id == "local-1"
    assert appointment.customer_name == "Ada Lovelace"
    assert appointment.customer_phone == "+15551234"
    assert appointment.customer_email == "ada@example.com"
    assert appointment.address == "12 Sun Street"
    assert appointment.notes == "Bring ladder"
    assert appointment.status == CrmAppointmentStatus.COMPLETED
    assert appointment.source_channel == "manual"
    assert appointment.scheduled_at == datetime(2026, 3, 1, 15, 0, tzinfo=timezone.utc)
    assert appointment.end_time == datetime.fromtimestamp(1772380800, tz=timezone.utc)
    assert appointment.ghl_data["calendar_id"] == "cal-1"
    assert appointment.ghl_data["contact"] == record["contact"]


def test_status_falls_back_to_appointment_status_fields():
    admin = RequestingUser(id="admin-1", role=Role.ADMIN)
    [a, b] = resolve_visible_appointments(
        [
            {"id": "a", "appoinmentStatus": "cancelled"},
            {"id": "b", "appointmentStatus": "completed"},
        ],
        admin,
    )
    assert a.status == CrmAppointmentStatus.CANCELLED
    assert b.status == CrmAppointmentStatus.COMPLETED


def test_unparseable_timestamps_become_none():
    admin = RequestingUser(id="admin-1", role=Role.ADMIN)
    [appointment] = resolve_visible_appointments(
        [{"id": "a", "startTime": "next tuesday", "endTime": 10**20}],
        admin,
    )
    assert appointment.scheduled_at is None
    assert appointment.end_time is None


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"contact": {"firstName": "Ada", "lastName": "Lovelace"}}, "Ada Lovelace"),
        ({"contact": {"firstName": "Ada"}}, "Ada"),
        ({"contact": {"name": "Ada L."}}, "Ada L."),
        ({"contact": {"email": "ada@example.com"}, "title": "Survey"}, "ada@example.com"),
        ({"contact": {}, "title": "Roof survey"}, "Roof survey"),
        ({"contact": "garbage"}, UNKNOWN_CUSTOMER),
        ({}, UNKNOWN_CUSTOMER),
    ],
)
def test_customer_name_fallbacks(payload, expected):
    assert customer_name(payload) == expected
