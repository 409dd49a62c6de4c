"""Logs command implementation."""

from typing import Optional

import typer
from rich.table import Table

from ..db import BatchLogRepository, close_connection_pool, get_connection
from ..errors import StoreError
from .common import console, load_context


def logs_command(
    ctx: typer.Context,
    feed_id: Optional[int] = typer.Option(None, "--feed-id", "-f", help="Only logs for this feed"),
    limit: int = typer.Option(20, "--limit", "-l", help="Rows to show", min=1),
) -> None:
    """Show recent batch run log rows."""
    config = load_context(ctx)
    repo = BatchLogRepository()

    try:
        with get_connection(config.get_db_config()) as conn:
            if feed_id is not None:
                logs = repo.find_by_feed_id(conn, feed_id, limit=limit)
            else:
                logs = repo.recent(conn, limit=limit)
    except StoreError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    if not logs:
        console.print("[yellow]No batch runs recorded.[/yellow]")
        return

    table = Table(title="Batch Run Log")
    table.add_column("ID", justify="right")
    table.add_column("Feed", justify="right", style="magenta")
    table.add_column("Status", style="bold")
    table.add_column("Fetched", justify="right")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Started", style="yellow")
    table.add_column("Finished", style="yellow")
    table.add_column("Error", style="dim")

    for row in logs:
        table.add_row(
            str(row.id),
            str(row.feed_id),
            row.status.value,
            str(row.items_fetched),
            str(row.items_created),
            row.started_at.strftime("%Y-%m-%d %H:%M:%S"),
            row.finished_at.strftime("%Y-%m-%d %H:%M:%S") if row.finished_at else "-",
            row.error_message or "",
        )

    console.print(table)
