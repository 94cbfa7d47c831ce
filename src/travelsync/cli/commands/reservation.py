"""
Reservation commands: normalize an extraction result and diff two versions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from travelsync.cli.common import console, err_console, get_app_config, print_json, read_json
from travelsync.core.match.options import MasterData
from travelsync.core.normalize.canonical import HEADER_FIELDS, Reservation, assemble_reservation
from travelsync.core.normalize.diff import diff_passengers, diff_reservations

app = typer.Typer(
    help="Normalize and compare reservations",
    no_args_is_help=True,
)


@app.command("normalize")
def normalize(
    ctx: typer.Context,
    input_file: Path = typer.Argument(..., help="Extraction result (JSON object)"),
    today: Optional[str] = typer.Option(
        None,
        "--today",
        help="Date used as the reservation date default (YYYY-MM-DD)",
    ),
    master_data_file: Optional[Path] = typer.Option(
        None,
        "--master-data",
        "-m",
        help="JSON with statuses, reservationTypes, clients, sellers option lists",
    ),
    legacy_aliases: bool = typer.Option(
        False,
        "--legacy-aliases",
        help="Also emit checkIn/checkOut, birthDate, paxType, direccion",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
) -> None:
    """Normalize an AI extraction result into a canonical reservation.

    Examples:
        travelsync reservation normalize extraction.json
        travelsync reservation normalize extraction.json --format json --today 2026-01-05
    """
    config = get_app_config(ctx)
    raw = read_json(input_file)

    master_data = None
    if master_data_file:
        master_data = _load_master_data(read_json(master_data_file))

    reservation = assemble_reservation(
        raw,
        config=config.normalization,
        today=today,
        master_data=master_data,
        fuzzy_threshold=config.matching.option_fuzzy_threshold,
    )

    if format == "json":
        data = reservation.to_dict(legacy_aliases=legacy_aliases)
        data["qualityScore"] = reservation.quality_score()
        print_json(data)
        return

    _print_reservation(reservation)


@app.command("diff")
def diff(
    new_file: Path = typer.Argument(..., help="Reservation to save (JSON object)"),
    old_file: Optional[Path] = typer.Argument(
        None,
        help="Stored reservation (omit for a new reservation)",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
) -> None:
    """Show which sections changed between two reservation versions.

    Examples:
        travelsync reservation diff edited.json stored.json
    """
    new = read_json(new_file)
    old = read_json(old_file) if old_file else None

    changes = diff_reservations(new, old)
    new_passengers = new.get("passengers") if isinstance(new, dict) else None
    old_passengers = old.get("passengers") if isinstance(old, dict) else None
    changed_passengers = diff_passengers(
        new_passengers if isinstance(new_passengers, list) else [],
        old_passengers if isinstance(old_passengers, list) else [],
    )

    if format == "json":
        print_json({
            "changes": changes.to_dict(),
            "changedPassengers": changed_passengers,
        })
        return

    if not changes.has_changes:
        console.print("[green]No changes[/green]")
        return

    table = Table(title="Changed sections", show_header=True, header_style="bold magenta")
    table.add_column("Section", style="cyan")
    for name in changes.changed_fields():
        table.add_row(name)
    console.print(table)

    if changed_passengers:
        pax_table = Table(title="Passengers", show_header=True, header_style="bold magenta")
        pax_table.add_column("Document", style="dim")
        pax_table.add_column("Name")
        pax_table.add_column("Change", justify="center")
        for p in changed_passengers:
            change = "[green]new[/green]" if p.get("isNew") else "[yellow]modified[/yellow]"
            name = " ".join(str(p.get(k) or "") for k in ("firstName", "lastName")).strip()
            pax_table.add_row(str(p.get("documentNumber") or "-"), name, change)
        console.print(pax_table)


def _load_master_data(data: object) -> MasterData:
    if not isinstance(data, dict):
        err_console.print("[red]Master data must be a JSON object[/red]")
        raise typer.Exit(1)

    def options(key: str) -> list[str]:
        values = data.get(key) or []
        return [str(v) for v in values] if isinstance(values, list) else []

    return MasterData(
        statuses=options("statuses"),
        reservation_types=options("reservationTypes"),
        clients=options("clients"),
        sellers=options("sellers"),
    )


def _print_reservation(reservation: Reservation) -> None:
    header = Table(title="Reservation", show_header=True, header_style="bold magenta")
    header.add_column("Field", style="cyan")
    header.add_column("Value")
    for attr, key in HEADER_FIELDS.items():
        value = getattr(reservation, attr)
        if value not in (None, "", 0):
            header.add_row(key, str(value))
    header.add_row("confidence", f"{reservation.confidence:.2f}")
    header.add_row("quality", f"{reservation.quality_score():.2f}")
    console.print(header)

    if reservation.passengers:
        table = Table(title=f"Passengers ({len(reservation.passengers)})", header_style="bold magenta")
        table.add_column("Name")
        table.add_column("Document", style="dim")
        table.add_column("Type", justify="center")
        table.add_column("Nationality")
        table.add_column("Birth", justify="right")
        for p in reservation.passengers:
            name = " ".join(part for part in (p.first_name, p.last_name) if part)
            document = " ".join(part for part in (p.document_type, p.document_number) if part)
            table.add_row(name, document or "-", p.passenger_type, p.nationality or "-", p.date_of_birth or "-")
        console.print(table)

    if reservation.flights:
        table = Table(title=f"Flights ({len(reservation.flights)})", header_style="bold magenta")
        table.add_column("Flight", style="cyan")
        table.add_column("Route")
        table.add_column("Departure", justify="right")
        table.add_column("Arrival", justify="right")
        for f in reservation.flights:
            table.add_row(
                f.flight_number,
                f"{f.origin} -> {f.destination}",
                " ".join(v for v in (f.departure_date, f.departure_time) if v) or "-",
                " ".join(v for v in (f.arrival_date, f.arrival_time) if v) or "-",
            )
        console.print(table)

    details = ([reservation.hotel] if reservation.hotel else []) + reservation.services
    if details:
        table = Table(title="Hotel and services", header_style="bold magenta")
        table.add_column("Kind", style="dim")
        table.add_column("Name")
        table.add_column("Destination")
        table.add_column("In", justify="right")
        table.add_column("Out", justify="right")
        table.add_column("Nts", justify="right")
        table.add_column("Estado", justify="center")
        for d in details:
            table.add_row(
                d.kind or "-",
                d.display_name or "-",
                d.destino or "-",
                d.date_in or "-",
                d.date_out or "-",
                str(d.nts),
                d.estado or "-",
            )
        console.print(table)

    for entity in reservation.rejected:
        index = "" if entity.index is None else f"[{entity.index}]"
        console.print(f"[yellow]Dropped {entity.collection}{index}:[/yellow] {entity.reason}")
    for warning in reservation.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
