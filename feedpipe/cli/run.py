"""Run command implementation."""

from typing import List, Optional

import typer
from rich.table import Table

from ..db import close_connection_pool, get_connection
from ..pipeline import BatchOrchestrator, BatchSummary
from .common import console, load_context


def print_batch_summary(summary: BatchSummary) -> None:
    """Print per-feed outcomes and batch totals."""
    table = Table(title="Batch Summary")
    table.add_column("Feed", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Fetched", justify="right")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Duration", style="yellow")
    table.add_column("Error", style="dim")

    for outcome in summary.outcomes:
        status = outcome.status.value
        styled = f"[green]{status}[/green]" if status == "success" else f"[red]{status}[/red]"
        table.add_row(
            outcome.feed_name,
            styled,
            str(outcome.items_fetched),
            str(outcome.items_created),
            f"{outcome.duration:.1f}s",
            outcome.error or "",
        )

    console.print(table)
    console.print(
        f"Status: [bold]{summary.status}[/bold] - "
        f"{summary.succeeded}/{summary.total_feeds} feeds succeeded, "
        f"{summary.items_created} new items"
    )
    if summary.error:
        console.print(f"[red]{summary.error}[/red]")


def run_command(
    ctx: typer.Context,
    feed_ids: Optional[List[int]] = typer.Option(
        None,
        "--feed-id",
        "-f",
        help="Only process these feed IDs (repeatable). Default: all active feeds",
    ),
) -> None:
    """Fetch every active feed once and store new items."""
    config = load_context(ctx)

    try:
        with get_connection(config.get_db_config()) as conn:
            orchestrator = BatchOrchestrator(conn, config.config.ingestion)
            summary = orchestrator.run_batch(list(feed_ids) if feed_ids else None)
    except KeyboardInterrupt:
        console.print("\n[yellow]Batch interrupted by user[/yellow]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    print_batch_summary(summary)
    if summary.status != "completed":
        raise typer.Exit(1)
