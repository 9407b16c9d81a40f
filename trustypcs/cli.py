"""CLI utilities."""

import logging
import sys

import click

from trustypcs.api.auth import ADMIN_ROLES, create_access_token
from trustypcs.config import app_settings
from trustypcs.core.defaults import default_settings
from trustypcs.core.errors import SettingsError
from trustypcs.core.settings_store import SqlSettingsStore, create_settings_store
from trustypcs.database import init_db


@click.group()
@click.option(
    "--store",
    "backend",
    default=None,
    type=click.Choice(["sql", "memory"]),
    help="Settings store backend (defaults to SETTINGS_STORE).",
)
@click.pass_context
def cli(ctx: click.Context, backend: str):
    """TrustyPCS settings CLI."""
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["backend"] = backend or app_settings.settings_store


def _store(ctx: click.Context):
    """Settings store for this invocation; tests may preset ctx.obj["store"]."""
    if "store" not in ctx.obj:
        store = create_settings_store(ctx.obj["backend"])
        if isinstance(store, SqlSettingsStore):
            init_db()
        ctx.obj["store"] = store
    return ctx.obj["store"]


@cli.command("init-db")
def init_db_command():
    """Create database tables."""
    init_db()
    click.echo("Database tables created")


@cli.command()
@click.pass_context
def list_settings(ctx: click.Context):
    """Print all settings."""
    for entry in _store(ctx).get_settings():
        click.echo(f"{entry.key_name}={entry.value}")


@cli.command()
@click.argument("key")
@click.pass_context
def get_setting(ctx: click.Context, key: str):
    """Print one setting value."""
    entry = _store(ctx).get_setting(key)
    if entry is None:
        click.echo(f"Setting {key} not found", err=True)
        sys.exit(1)
    click.echo(entry.value)


@cli.command()
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_setting(ctx: click.Context, key: str, value: str):
    """Create or update a setting."""
    try:
        _store(ctx).update_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Setting {key} updated")


@cli.command()
@click.pass_context
def seed_defaults(ctx: click.Context):
    """Insert default site settings that are not set yet."""
    try:
        inserted = _store(ctx).insert_missing(default_settings())
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Inserted {len(inserted)} default settings")


@cli.command()
@click.option("--subject", required=True, help="Token subject (user id).")
@click.option("--role", default="admin", type=click.Choice(["member", *ADMIN_ROLES]))
def issue_token(subject: str, role: str):
    """Mint an access token for settings writes."""
    click.echo(create_access_token(app_settings, subject, role))


if __name__ == "__main__":
    cli()
