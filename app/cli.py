import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate
from models import Account
from app import repositories as repo
from app.auth.identity import ADMIN
from app.utils.db import transactional


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("create-admin")
@click.option("--username", prompt=True, help="Login name of the admin account")
@click.password_option(help="Password for the admin account")
@with_appcontext
def create_admin(username, password):
    """Bootstrap an elevated account; it sees and changes every region."""
    if len(password) < 6:
        raise click.ClickException("Password must be at least 6 characters")
    if repo.accounts.find(username=username):
        raise click.ClickException(f"Account {username} already exists")
    account = Account(username=username, role=ADMIN, region=None)
    account.set_password(password)
    with transactional("Failed to create admin account"):
        repo.accounts.insert(account)
    click.echo(f"Admin account {username} created with id {account.id}.")


@click.command("list-regions")
@with_appcontext
def list_regions():
    """Print the configured regions."""
    for region in current_app.config["REGIONS"]:
        click.echo(region)


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


def register_cli(app):
    app.cli.add_command(create_admin)
    app.cli.add_command(list_regions)
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
