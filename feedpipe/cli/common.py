"""Helpers shared by CLI commands."""

import typer
from rich.console import Console

from ..config import Config
from ..db import validate_connection
from ..log import configure_logging

console = Console()


def load_context(ctx: typer.Context) -> Config:
    """Load configuration, configure logging and check the database."""
    config: Config = ctx.obj if isinstance(ctx.obj, Config) else Config()
    try:
        configure_logging(config.config.logging)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        console.print("Run 'feedpipe init' to create a configuration.")
        raise typer.Exit(1)

    if not validate_connection(config.get_db_config()):
        console.print("[red]Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    return config
