"""
Shared CLI helpers: consoles, JSON input and the active configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import typer
from rich.console import Console

from travelsync.core.config import AppConfig

console = Console()
err_console = Console(stderr=True)


def read_json(path: Path) -> Any:
    """Read and decode a JSON file, exiting with code 1 on failure."""
    try:
        return orjson.loads(path.read_bytes())
    except FileNotFoundError:
        err_console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(1)
    except orjson.JSONDecodeError as e:
        err_console.print(f"[red]Invalid JSON in {path}:[/red] {e}")
        raise typer.Exit(1)


def print_json(data: Any) -> None:
    """Print data as indented JSON on stdout."""
    console.print_json(orjson.dumps(data, default=str).decode("utf-8"))


def get_app_config(ctx: typer.Context) -> AppConfig:
    """Configuration loaded by the root callback (defaults when absent)."""
    root = ctx.find_root()
    if isinstance(root.obj, AppConfig):
        return root.obj
    return AppConfig()
