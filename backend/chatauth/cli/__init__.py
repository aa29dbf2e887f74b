"""Command-line interface registration for the Flask application."""

from __future__ import annotations

import click
from flask import Flask
from flask.cli import AppGroup

from chatauth.core.extensions import db

auth_cli = AppGroup("auth", help="Authentication maintenance commands.")


@auth_cli.command("init-db")
@click.option("--drop", is_flag=True, help="Drop existing tables first.")
def init_db(drop: bool) -> None:
    """Create the schema directly (development only; use migrations elsewhere)."""
    if drop:
        db.drop_all()
        click.echo("Dropped all tables.")
    db.create_all()
    click.echo("Database schema created.")


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry receives ``auth``.
    """
    app.cli.add_command(auth_cli)
