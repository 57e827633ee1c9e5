"""CLI tools for API administration."""

import asyncio

import click

from app.db.enums import Role
from app.db.session import SessionLocal


@click.group()
def cli():
    """Solar Ops CLI tools."""
    pass


@cli.command()
@click.option("--username", required=True, help="Login name (stored lowercased)")
@click.option("--email", required=True, help="User email address")
@click.option("--name", required=True, help="Display name; must match the GoHighLevel user's name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    default=Role.SURVEYOR.value,
    show_default=True,
)
@click.option("--ghl-user-id", default=None, help="GoHighLevel user id, if already known")
@click.option("--ghl-team-id", default=None, help="GoHighLevel team id")
@click.password_option(help="Initial password")
def create_user(
    username: str,
    email: str,
    name: str,
    role: str,
    ghl_user_id: str | None,
    ghl_team_id: str | None,
    password: str,
):
    """
    Create a user. Used to bootstrap the first ADMIN.

    Example:
        python -m app.cli create-user --username admin --email admin@example.com \\
            --name "Office Admin" --role ADMIN
    """
    from app.services import user_service

    db = SessionLocal()
    try:
        user = user_service.create_user(
            db,
            username=username,
            email=email,
            password=password,
            name=name,
            role=Role(role.upper()),
            ghl_user_id=ghl_user_id,
            ghl_team_id=ghl_team_id,
        )
        click.echo(f"✓ Created user: {user.username}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Role: {user.role}")
    except ValueError as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--username", required=True, help="User to resolve")
def resolve_ghl_id(username: str):
    """
    Look up (and cache) a user's GoHighLevel user id.

    Example:
        python -m app.cli resolve-ghl-id --username rob.koch
    """
    from app.services import user_service
    from app.services.ghl_appointment_service import resolve_ghl_user_id
    from app.services.ghl_client import GoHighLevelClient, get_ghl_credentials

    credentials = get_ghl_credentials()
    if credentials is None:
        click.echo("❌ GHL_API_TOKEN / location id not configured")
        return

    db = SessionLocal()
    try:
        user = user_service.get_user_by_username(db, username)
        if not user:
            click.echo(f"❌ User not found: {username}")
            return

        ghl_user_id = asyncio.run(
            resolve_ghl_user_id(db, user, GoHighLevelClient(credentials))
        )
        if ghl_user_id:
            click.echo(f"✓ {user.username} → GHL user {ghl_user_id}")
        else:
            click.echo(f"❌ No GHL user found for {user.display_name}")
    finally:
        db.close()


@cli.command()
@click.option("--username", required=True, help="User to revoke tokens for")
def revoke_sessions(username: str):
    """
    Revoke all tokens for a user by bumping their token_version.

    Example:
        python -m app.cli revoke-sessions --username jane.doe
    """
    from app.services import user_service

    db = SessionLocal()
    try:
        user = user_service.get_user_by_username(db, username)
        if not user:
            click.echo(f"❌ User not found: {username}")
            return

        old_version = user.token_version
        user_service.revoke_all_sessions(db, user.id)
        db.refresh(user)
        click.echo(f"✓ Revoked all tokens for {user.username}")
        click.echo(f"  Token version: {old_version} → {user.token_version}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
