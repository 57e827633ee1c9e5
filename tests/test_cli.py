"""Tests for the admin CLI."""

from click.testing import CliRunner

from app.cli import cli
from app.core.security import verify_password
from app.db.enums import Role
from app.services import user_service


def test_create_user(db):
    result = CliRunner().invoke(
        cli,
        [
            "create-user",
            "--username", "Admin",
            "--email", "admin@example.com",
            "--name", "Office Admin",
            "--role", "admin",
            "--password", "bootstrap-pass",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Created user: admin" in result.output
    user = user_service.get_user_by_username(db, "admin")
    assert user.role == Role.ADMIN.value
    assert verify_password("bootstrap-pass", user.password_hash)


def test_create_user_duplicate(db, test_user):
    result = CliRunner().invoke(
        cli,
        [
            "create-user",
            "--username", test_user.username,
            "--email", "other@example.com",
            "--name", "Other",
            "--password", "bootstrap-pass",
        ],
    )

    assert result.exit_code == 0
    assert "Error" in result.output


def test_revoke_sessions(db, test_user):
    old_version = test_user.token_version

    result = CliRunner().invoke(cli, ["revoke-sessions", "--username", test_user.username])

    assert result.exit_code == 0, result.output
    db.refresh(test_user)
    assert test_user.token_version == old_version + 1


def test_resolve_ghl_id_without_credentials(db, test_user):
    result = CliRunner().invoke(cli, ["resolve-ghl-id", "--username", test_user.username])

    assert result.exit_code == 0
    assert "not configured" in result.output
