"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

load_dotenv()

from ..config import Config
from .feeds import feeds_app
from .init import init_command
from .items import items_command
from .logs import logs_command
from .run import run_command

app = typer.Typer(
    name="feedpipe",
    help="Feed ingestion pipeline - fetch, deduplicate and browse RSS/Atom items",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: $FEEDPIPE_CONFIG or ~/.config/feedpipe/config.yaml)",
    ),
) -> None:
    """Feed ingestion pipeline."""
    ctx.obj = Config(config_path)


app.command("init")(init_command)
app.command("run")(run_command)
app.command("items")(items_command)
app.command("logs")(logs_command)
app.add_typer(feeds_app, name="feeds", help="Manage configured feeds")


if __name__ == "__main__":
    app()
