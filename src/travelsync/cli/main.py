"""
TravelSync CLI - Main entry point.

Developer tool for exercising the reservation normalization, catalog
matching and change detection core on JSON files.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from travelsync import __app_name__, __version__
from travelsync.cli.common import console, err_console
from travelsync.core.config import AppConfig, ConfigError, dump_app_config, load_app_config
from travelsync.core.config.loader import DEFAULT_CONFIG_PATH
from travelsync.core.logging import setup_logging

# Load environment variables from .env (if present)
load_dotenv()

# Install rich traceback for better error display
install_rich_traceback(show_locals=False, width=120)

# Force UTF-8 on Windows so accented names print
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (AttributeError, OSError):
                pass

# Create main app
app = typer.Typer(
    name=__app_name__,
    help="Reservation normalization, catalog matching and change detection",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (default: $TRAVELSYNC_CONFIG or configs/app.yaml)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override the configured log level",
    ),
) -> None:
    """TravelSync - Reservation data normalization, matching and diff engine."""
    try:
        config = load_app_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    setup_logging(
        level=(log_level or config.logging.level).upper(),
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )
    ctx.obj = config


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import catalog, reservation  # noqa: E402

app.add_typer(reservation.app, name="reservation", help="Normalize and compare reservations")
app.add_typer(catalog.app, name="catalog", help="Match catalog rows and master-data options")


# =============================================================================
# Init Command
# =============================================================================


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Write a default configuration file.

    Creates configs/app.yaml with the default normalization, matching
    and logging settings, ready to be tuned.
    """
    if DEFAULT_CONFIG_PATH.exists() and not force:
        err_console.print(
            f"[yellow]{DEFAULT_CONFIG_PATH} already exists.[/yellow] Use --force to overwrite."
        )
        raise typer.Exit(1)

    dump_app_config(AppConfig(), DEFAULT_CONFIG_PATH)
    Path("logs").mkdir(parents=True, exist_ok=True)

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - TravelSync initialized![/bold green]\n\n"
        "Created:\n"
        f"  - [cyan]{DEFAULT_CONFIG_PATH}[/cyan] - Application configuration\n"
        "  - [cyan]logs/[/cyan] - Log files\n\n"
        "Next steps:\n"
        "  1. Normalize an extraction: [yellow]travelsync reservation normalize <file>[/yellow]\n"
        "  2. Match catalog rows: [yellow]travelsync catalog match <file> --kind hotel[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
