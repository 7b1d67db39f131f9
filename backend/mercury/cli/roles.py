"""Flask CLI commands for managing the role catalogue."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from mercury.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


def _echo_summary(counters: dict[str, int]) -> None:
    """Pretty-print how many role rows were inserted."""
    created = counters.get("created", 0)
    existing = counters.get("existing", 0)
    click.echo("Role summary:")
    click.echo(f"  roles  created={created:>2}  existing={existing:>2}")


@click.group("roles")
def roles_cli() -> None:
    """Role catalogue commands."""


@roles_cli.command("seed")
@with_appcontext
def seed_command() -> None:
    """Insert any missing role rows (ADMIN, STAFF, SELLER, MEMBER)."""
    try:
        with SQLAlchemyUnitOfWork() as uow:
            counters = uow.roles.ensure_catalogue()
    except Exception as exc:  # pragma: no cover - CLI safeguard
        raise click.ClickException(f"Role seeding failed: {exc}") from exc
    LOGGER.info("roles.seed created=%d existing=%d", counters["created"], counters["existing"])
    _echo_summary(counters)
