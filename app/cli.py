import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate

from app.cache import get_cache
from app.cache.invalidation import flush_all
from app.services.commission import recalculate_all_commissions
from app.services.settings_store import seed_default_documents
from app.utils import transactional


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


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


@click.command("recalculate-commissions")
@click.option("--limit", type=int, default=None, help="Only the first N completed orders")
@with_appcontext
def recalculate_commissions(limit):
    """Recompute admin commission on completed orders."""
    updated = recalculate_all_commissions(limit=limit)
    click.echo(f"Recalculated commission for {updated} orders.")


@click.command("cache-flush")
@click.option("--prefix", default=None, help="Only keys starting with this prefix")
@with_appcontext
def cache_flush(prefix):
    """Clear the response cache."""
    store = get_cache()
    if prefix:
        cleared = store.flush_by_prefix(prefix)
        click.echo(f"Cleared {cleared if cleared is not None else 'unknown number of'} keys under {prefix}.")
        return
    result = flush_all(store)
    click.echo(result["message"])


@click.command("seed-settings")
@with_appcontext
def seed_settings():
    """Store default values for settings documents that are missing."""
    with transactional("Failed to seed settings"):
        created = seed_default_documents()
    click.echo(f"Seeded {len(created)} settings documents: {', '.join(created) or 'none'}")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(recalculate_commissions)
    app.cli.add_command(cache_flush)
    app.cli.add_command(seed_settings)
