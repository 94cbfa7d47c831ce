"""
Catalog commands: pick a catalog row for a detail and resolve option labels.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from travelsync.cli.common import console, err_console, get_app_config, print_json, read_json
from travelsync.core.config import EntityKind
from travelsync.core.match.enrich import detail_from_candidate
from travelsync.core.match.options import resolve_option
from travelsync.core.match.scoring import EntityMatcher

app = typer.Typer(
    help="Match catalog rows and master-data options",
    no_args_is_help=True,
)


@app.command("match")
def match(
    ctx: typer.Context,
    input_file: Path = typer.Argument(
        ...,
        help='JSON object with "target" (detail) and "candidates" (rows)',
    ),
    kind: EntityKind = typer.Option(
        EntityKind.HOTEL,
        "--kind",
        "-k",
        help="Entity kind to score as",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Minimum score (exclusive); configured threshold when omitted",
    ),
    enrich: bool = typer.Option(
        False,
        "--enrich",
        help="Print the target enriched with the selected row",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
) -> None:
    """Score catalog rows against a detail and select the best one.

    Examples:
        travelsync catalog match search.json --kind hotel
        travelsync catalog match search.json --kind servicio --enrich --format json
    """
    config = get_app_config(ctx)
    data = read_json(input_file)

    target = data.get("target") if isinstance(data, dict) else None
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(target, dict) or not isinstance(candidates, list):
        err_console.print('[red]Expected an object with "target" and "candidates"[/red]')
        raise typer.Exit(1)

    matcher = EntityMatcher(config.matching)
    scores = matcher.score_all(candidates, target, kind)
    result = matcher.select_best(candidates, target, kind, threshold)

    enriched = None
    if enrich and result is not None:
        enriched = detail_from_candidate(
            result.candidate,
            target,
            prefer_day_first=config.normalization.prefer_day_first,
        )

    if format == "json":
        print_json({
            "scores": [round(s, 2) for s in scores],
            "match": result.to_dict() if result else None,
            "enriched": enriched.to_dict() if enriched else None,
        })
        return

    table = Table(title=f"Candidates ({kind.value})", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Row")
    table.add_column("Score", justify="right")
    for index, (candidate, score) in enumerate(zip(candidates, scores)):
        style = "bold green" if result and result.index == index else "default"
        summary = " | ".join(str(v) for v in candidate.values() if v) if isinstance(candidate, dict) else str(candidate)
        table.add_row(str(index), summary, f"[{style}]{score:.2f}[/{style}]")
    console.print(table)

    if result is None:
        console.print("[yellow]No confident match[/yellow]")
        return

    console.print(f"[green]Selected row {result.index}[/green] (score {result.score:.2f})")
    if enriched:
        print_json(enriched.to_dict())


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="Extracted label"),
    options: Optional[List[str]] = typer.Option(
        None,
        "--option",
        "-o",
        help="Available option label (repeatable)",
    ),
    options_file: Optional[Path] = typer.Option(
        None,
        "--options-file",
        help="JSON array of option labels",
    ),
) -> None:
    """Resolve a label against master-data options.

    Examples:
        travelsync catalog resolve "Confirmada" -o "CONFIRMADA [FI]" -o "CANCELADA [CX]"
    """
    config = get_app_config(ctx)
    labels = list(options or [])
    if options_file:
        data = read_json(options_file)
        if not isinstance(data, list):
            err_console.print("[red]Options file must contain a JSON array[/red]")
            raise typer.Exit(1)
        labels.extend(str(v) for v in data)

    if not labels:
        err_console.print("[red]No options given[/red]")
        raise typer.Exit(1)

    result = resolve_option(value, labels, fuzzy_threshold=config.matching.option_fuzzy_threshold)
    if result is None:
        console.print(f"[yellow]No option matched[/yellow] {value!r}")
        raise typer.Exit(1)

    console.print(f"[green]{result.value}[/green] ({result.method}, {result.score:.0f})")
