"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_store import JsonRosterStore
from ..config import AppConfig, load_config
from ..domain.exceptions import DayOutOfBounds, RosterError
from ..domain.models import HourColor, Rank
from ..services.errors import InvalidSegmentError
from ..services.roster_service import RosterService, SegmentReport
from .render import render_day, render_handover

app = typer.Typer(
    name="shiftroster",
    help="Manage hour-by-hour duty rosters for multi-day events",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
RangesArgument = Annotated[
    List[str],
    typer.Argument(help="Hour ranges as START-END, e.g. 15-24 0-6"),
]


def _configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_service(config_file: Optional[Path]) -> Tuple[AppConfig, RosterService]:
    """Load configuration, set up logging and wire the service to its store."""
    config = load_config(config_file)
    _configure_logging(config)
    store = JsonRosterStore(config.store_path)
    return config, RosterService(store, timezone=config.timezone)


def _parse_ranges(tokens: List[str]) -> List[Tuple[int, int]]:
    """
    Parse "START-END" tokens into hour pairs.

    Example: ["15-24", "0-6"] -> [(15, 24), (0, 6)]
    """
    segments: List[Tuple[int, int]] = []
    for token in tokens:
        start, sep, end = token.partition("-")
        if not sep or not start.isdigit() or not end.isdigit():
            raise InvalidSegmentError(f"Invalid hour range '{token}', expected START-END")
        segments.append((int(start), int(end)))
    return segments


def _print_report(report: SegmentReport, success_text: str, failure_text: str) -> None:
    if not report.succeeded and not report.failed:
        console.print("[yellow]⚠ Nothing to do.[/yellow]")
        return

    if report.succeeded:
        console.print(f"[green]✓ {success_text}: {' '.join(report.succeeded_ranges)}[/green]")
    if report.failed:
        console.print(f"[yellow]✗ {failure_text}: {' '.join(report.failed_ranges)}[/yellow]")


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Roster name")],
    start: Annotated[str, typer.Argument(help="Event start as yyyyMMddHH[mm[ss]]")],
    end: Annotated[str, typer.Argument(help="Event end as yyyyMMddHH[mm[ss]]")],
    config_file: ConfigOption = None,
):
    """
    Create a new roster. Both ends are rounded to the nearest hour.

    Example:

        shiftroster create summer 202512111400 202512132000
    """
    try:
        config, service = _build_service(config_file)
        roster = service.create_roster(name, start, end)

        console.print(
            f"[green]✓ Roster '{name}' created:[/green] {roster.days} day(s), "
            f"{roster.window.start.in_timezone(config.timezone).format('YYYY-MM-DD HH:mm')} → "
            f"{roster.window.end.in_timezone(config.timezone).format('YYYY-MM-DD HH:mm')} "
            f"({config.timezone})"
        )
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def delete(
    name: Annotated[str, typer.Argument(help="Roster name")],
    config_file: ConfigOption = None,
):
    """
    Delete a roster.
    """
    try:
        _, service = _build_service(config_file)
        service.delete_roster(name)
        console.print(f"[green]✓ Roster '{name}' deleted.[/green]")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command("list")
def list_rosters(config_file: ConfigOption = None):
    """
    List all stored rosters.
    """
    try:
        _, service = _build_service(config_file)
        names = service.list_rosters()

        if not names:
            console.print("[yellow]No rosters stored yet.[/yellow]")
            return

        table = Table(title="Rosters", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="bold yellow")
        table.add_column("Days", justify="right")
        for roster_name in names:
            table.add_row(roster_name, str(service.get_roster(roster_name).days))

        console.print()
        console.print(table)
        console.print()
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Roster name")],
    person: Annotated[str, typer.Argument(help="Person to put on duty")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    ranges: RangesArgument,
    config_file: ConfigOption = None,
):
    """
    Put a person on duty for one or more hour ranges of a day.

    Example:

        shiftroster add summer alice 2 0-6 15-24
    """
    try:
        _, service = _build_service(config_file)
        report = service.add_shifts(name=name, person=person, day=day, segments=_parse_ranges(ranges))
        _print_report(
            report,
            f"Added {person} on day {day}",
            f"Could not add {person} on day {day}",
        )
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="Roster name")],
    person: Annotated[str, typer.Argument(help="Person to take off duty")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    ranges: RangesArgument,
    config_file: ConfigOption = None,
):
    """
    Take a person off duty for one or more hour ranges of a day.
    """
    try:
        _, service = _build_service(config_file)
        report = service.remove_shifts(name=name, person=person, day=day, segments=_parse_ranges(ranges))
        _print_report(
            report,
            f"Removed {person} from day {day}",
            f"{person} was not removed on day {day}",
        )
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def exchange(
    name: Annotated[str, typer.Argument(help="Roster name")],
    old_person: Annotated[str, typer.Argument(help="Person handing the hours over")],
    new_person: Annotated[str, typer.Argument(help="Person taking the hours")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    ranges: RangesArgument,
    config_file: ConfigOption = None,
):
    """
    Hand one person's hours over to another person.
    """
    try:
        _, service = _build_service(config_file)
        report = service.exchange_shifts(
            name=name,
            old_person=old_person,
            new_person=new_person,
            day=day,
            segments=_parse_ranges(ranges),
        )
        _print_report(
            report,
            f"{old_person} → {new_person} on day {day}",
            f"Could not hand over to {new_person} on day {day}",
        )
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def set_runner(
    name: Annotated[str, typer.Argument(help="Roster name")],
    person: Annotated[str, typer.Argument(help="Member name")],
    rank: Annotated[Rank, typer.Argument(help="Member rank")],
    config_file: ConfigOption = None,
):
    """
    Assign a rank to a member.
    """
    try:
        _, service = _build_service(config_file)
        service.set_runner(name, person, rank)
        console.print(f"[green]✓ {person} is now ranked {rank.value}.[/green]")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def del_runner(
    name: Annotated[str, typer.Argument(help="Roster name")],
    person: Annotated[str, typer.Argument(help="Member name")],
    config_file: ConfigOption = None,
):
    """
    Remove a member's rank.
    """
    try:
        _, service = _build_service(config_file)
        service.remove_runner(name, person)
        console.print(f"[green]✓ Rank of {person} removed.[/green]")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def rename(
    name: Annotated[str, typer.Argument(help="Roster name")],
    old_name: Annotated[str, typer.Argument(help="Current name")],
    new_name: Annotated[str, typer.Argument(help="New name")],
    config_file: ConfigOption = None,
):
    """
    Rename a person throughout the roster.
    """
    try:
        _, service = _build_service(config_file)
        touched = service.rename_person(name, old_name, new_name)
        console.print(f"[green]✓ Renamed {old_name} → {new_name} ({touched} hour(s)).[/green]")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def color(
    name: Annotated[str, typer.Argument(help="Roster name")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    start: Annotated[int, typer.Argument(help="First hour")],
    end: Annotated[int, typer.Argument(help="Hour after the last one")],
    hour_color: Annotated[HourColor, typer.Argument(metavar="COLOR", help="Status color")],
    config_file: ConfigOption = None,
):
    """
    Color an hour range, e.g. black it out for maintenance.

    Only schedulable hours can be colored; a range touching an already
    colored hour is left unchanged.
    """
    try:
        _, service = _build_service(config_file)
        colored = service.set_color(name=name, day=day, start=start, end=end, color=hour_color)
        if colored:
            console.print(f"[green]✓ Day {day} {start}-{end} set to {hour_color.value}.[/green]")
        else:
            console.print(f"[yellow]⚠ Day {day} {start}-{end} left unchanged.[/yellow]")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def set_ending(
    name: Annotated[str, typer.Argument(help="Roster name")],
    end: Annotated[str, typer.Argument(help="New event end as yyyyMMddHH[mm[ss]]")],
    config_file: ConfigOption = None,
):
    """
    Move the event end. Days are added or dropped as needed.
    """
    try:
        config, service = _build_service(config_file)
        roster = service.set_ending(name, end)
        console.print(
            f"[green]✓ Event now ends "
            f"{roster.window.end.in_timezone(config.timezone).format('YYYY-MM-DD HH:mm')} "
            f"({roster.days} day(s)).[/green]"
        )
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def show(
    name: Annotated[str, typer.Argument(help="Roster name")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    config_file: ConfigOption = None,
):
    """
    Show the duty grid of a day.
    """
    try:
        config, service = _build_service(config_file)
        roster = service.get_roster(name)
        if not 1 <= day <= roster.days:
            raise DayOutOfBounds(f"Day {day} out of range (1-{roster.days})")

        console.print()
        console.print(render_day(roster, day - 1, show_symbols=config.display.show_symbols))
        console.print()
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def handover(
    name: Annotated[str, typer.Argument(help="Roster name")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    config_file: ConfigOption = None,
):
    """
    Show who comes on and goes off duty at each hour of a day.
    """
    try:
        _, service = _build_service(config_file)
        roster = service.get_roster(name)
        if not 1 <= day <= roster.days:
            raise DayOutOfBounds(f"Day {day} out of range (1-{roster.days})")

        console.print()
        console.print(render_handover(roster, day - 1))
        console.print()
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def left(
    name: Annotated[str, typer.Argument(help="Roster name")],
    day: Annotated[int, typer.Argument(help="Event day, starting at 1")],
    config_file: ConfigOption = None,
):
    """
    List the understaffed hour ranges of a day with the number of open slots.
    """
    try:
        _, service = _build_service(config_file)
        ranges = service.missing_ranges(name, day)

        if not ranges:
            console.print(f"[green]✓ Day {day} is fully staffed.[/green]")
            return

        console.print(f"[bold cyan]Open slots on day {day}:[/bold cyan]")
        for line in ranges:
            console.print(f"  {line}")
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def export(
    name: Annotated[str, typer.Argument(help="Roster name")],
    day: Annotated[Optional[int], typer.Option("--day", "-d", help="Export a single day (starting at 1)")] = None,
    config_file: ConfigOption = None,
):
    """
    Export the schedule as JSON, without hours outside the event.
    """
    try:
        _, service = _build_service(config_file)
        roster = service.get_roster(name)
        data = roster.export_schedule(day - 1 if day is not None else None)
        console.print_json(data=data)
    except (RosterError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]shiftroster[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
