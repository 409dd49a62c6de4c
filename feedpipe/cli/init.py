"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.panel import Panel

from ..config import ConfigModel, FeedConfig, save_config, save_feeds
from ..db import close_connection_pool, init_database, validate_connection
from .common import console


def create_default_feeds() -> List[FeedConfig]:
    """Create a starter set of feeds, one RSS 2.0 and one Atom."""
    return [
        FeedConfig(name="Python Insider", url="https://blog.python.org/feeds/posts/default"),
        FeedConfig(name="Hacker News", url="https://news.ycombinator.com/rss"),
    ]


def init_command(
    ctx: typer.Context,
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("feedpipe", "--db-name", help="Database name"),
    db_user: str = typer.Option("feedpipe", "--db-user", help="Database user"),
    seed_feeds: bool = typer.Option(
        True,
        "--seed-feeds/--no-seed-feeds",
        help="Write a starter feeds.yaml",
    ),
) -> None:
    """Write default configuration and create the database schema."""
    console.print(Panel.fit("feedpipe - Initialization", style="bold blue"))

    config_path: Path = ctx.obj.config_path
    feeds_path: Path = ctx.obj.feeds_path

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "FEEDPIPE_DB_PASSWORD",
        },
    )
    save_config(config, config_path)
    console.print(f"Created config: {config_path}")

    feeds = create_default_feeds() if seed_feeds else []
    save_feeds(feeds, feeds_path)
    console.print(f"Created feeds: {feeds_path} ({len(feeds)} feeds)")

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    try:
        if not validate_connection(db_config):
            console.print(
                "[red]Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: "
                "[bold]export FEEDPIPE_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)
        console.print("Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(db_config)
        except Exception as e:
            console.print(f"[red]Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
    finally:
        close_connection_pool()

    console.print(
        Panel(
            f"[green]feedpipe initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Feeds: {feeds_path}\n\n"
            f"Next steps:\n"
            f"1. Load feeds: [bold]feedpipe feeds sync[/bold]\n"
            f"2. Run a batch: [bold]feedpipe run[/bold]\n"
            f"3. Browse items: [bold]feedpipe items[/bold]",
            style="green",
        )
    )
