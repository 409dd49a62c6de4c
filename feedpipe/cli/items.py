"""Items command implementation."""

from typing import Optional

import typer
from rich.table import Table

from ..db import close_connection_pool, get_connection
from ..errors import FetchFailed
from ..reader import FeedItemReader
from .common import console, load_context


def items_command(
    ctx: typer.Context,
    feed_id: Optional[int] = typer.Option(None, "--feed-id", "-f", help="Only items from this feed"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Page size"),
    offset: int = typer.Option(0, "--offset", "-o", help="Items to skip", min=0),
) -> None:
    """Show one page of ingested items, newest first."""
    config = load_context(ctx)

    try:
        with get_connection(config.get_db_config()) as conn:
            reader = FeedItemReader(conn, config.config.reader)
            page = reader.get_items(feed_id=feed_id, limit=limit, offset=offset)
    except FetchFailed as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    if not page.items:
        console.print("[yellow]No items found.[/yellow]")
        return

    table = Table(title=f"Feed Items ({offset + 1}-{offset + len(page.items)} of {page.total})")
    table.add_column("Published", style="yellow")
    table.add_column("Feed", style="magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Saved", justify="center")
    table.add_column("URL", style="blue")

    for item in page.items:
        table.add_row(
            item.published_at.strftime("%Y-%m-%d %H:%M") if item.published_at else "-",
            item.feed_name,
            item.title,
            "✓" if item.is_saved else "",
            item.url,
        )

    console.print(table)
    if page.has_more:
        console.print(f"[dim]More items available: --offset {offset + len(page.items)}[/dim]")
