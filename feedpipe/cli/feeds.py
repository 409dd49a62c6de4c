"""Feed management commands."""

import typer
from rich.table import Table

from ..config import load_feeds
from ..db import FeedRepository, close_connection_pool, get_connection
from ..errors import StoreError
from .common import console, load_context

feeds_app = typer.Typer(help="Manage configured feeds")


@feeds_app.command("list")
def feeds_list(ctx: typer.Context) -> None:
    """List feeds stored in the database."""
    config = load_context(ctx)

    try:
        with get_connection(config.get_db_config()) as conn:
            feeds = FeedRepository().find_all(conn)
    except StoreError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    if not feeds:
        console.print("[yellow]No feeds configured.[/yellow]")
        return

    table = Table(title="Feeds")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Active", style="yellow")
    table.add_column("Last fetched", style="green")
    table.add_column("Next fetch", style="green")
    table.add_column("URL", style="blue")

    for feed in feeds:
        table.add_row(
            str(feed.id),
            feed.name,
            "✓" if feed.is_active else "✗",
            feed.last_fetched_at.strftime("%Y-%m-%d %H:%M") if feed.last_fetched_at else "-",
            feed.next_fetch_at.strftime("%Y-%m-%d %H:%M") if feed.next_fetch_at else "-",
            feed.url,
        )

    console.print(table)


@feeds_app.command("sync")
def feeds_sync(ctx: typer.Context) -> None:
    """Upsert feeds declared in feeds.yaml into the database."""
    config = load_context(ctx)

    try:
        declared = load_feeds(config.feeds_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    try:
        with get_connection(config.get_db_config()) as conn:
            feed_map = FeedRepository().sync_feeds(conn, declared)
    except StoreError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    console.print(f"[green]Synced {len(feed_map)} feeds from {config.feeds_path}[/green]")
