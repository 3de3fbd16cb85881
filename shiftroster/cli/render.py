"""
Rich table rendering of roster days and handover reports.
"""

from typing import List

from rich.table import Table
from rich.text import Text

from ..domain.models import HOURS_PER_DAY, SLOT_CAPACITY, HourColor, Rank
from ..domain.reports import occupant_phase
from ..domain.roster import Roster

_FULL_STYLE = "white on #696969"
_SHORT_STYLE = "black on #FFB6B2"
_HIDDEN_STYLE = {
    HourColor.BLACK: "on #000000",
    HourColor.GRAY: "on #B7B7B7",
}


def _format_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def day_title(roster: Roster, day: int) -> str:
    """e.g. "12/12 (Fri)  day 2" """
    date = roster.day_date(day)
    return f"{date.format('M/D (ddd)')}  day {day + 1}"


def render_day(roster: Roster, day: int, show_symbols: bool = True) -> Table:
    """
    Build the grid of one day.

    Invalid hours are left out, blacked or grayed-out hours are shown as
    blank colored rows, and each occupant cell is tinted by where it sits
    in that person's shift.
    """
    hours = roster.export_schedule(day)
    slots = [roster.hour_slot(day, hour) for hour in range(HOURS_PER_DAY)]
    missing = roster.missing_counts(day)

    table = Table(title=day_title(roster, day), show_header=True, header_style="bold cyan")
    table.add_column("Start", style="bold")
    table.add_column("End", style="bold")
    table.add_column("Left", justify="center")
    for rank in Rank:
        if show_symbols:
            table.add_column(rank.symbol, width=1, header_style=f"on {rank.color}")
        table.add_column(rank.label, min_width=10)

    for hour in sorted(hours):
        slot = slots[hour]
        row: List[Text] = [Text(_format_hour(hour)), Text(_format_hour(hour + 1))]

        if slot.color.is_hidden:
            blank_cells = 1 + SLOT_CAPACITY * (2 if show_symbols else 1)
            table.add_row(*row, *[Text("") for _ in range(blank_cells)], style=_HIDDEN_STYLE[slot.color])
            continue

        row.append(Text(f"@{missing[hour]}", style=_SHORT_STYLE if missing[hour] else _FULL_STYLE))

        for person in slot.occupants:
            if show_symbols:
                member_rank = roster.members.rank_of(person) if person else None
                symbol_style = f"on {member_rank.color}" if member_rank else ""
                row.append(Text(roster.members.symbol_for(person), style=symbol_style))
            if person is None:
                row.append(Text(""))
                continue
            phase = occupant_phase(slots, hour, person)
            row.append(Text(person, style=f"black on {phase.color}"))

        table.add_row(*row)

    return table


def render_handover(roster: Roster, day: int) -> Table:
    """Hours where someone comes on or goes off duty."""
    table = Table(title=f"Handover - {day_title(roster, day)}", show_header=True, header_style="bold cyan")
    table.add_column("Hour", style="bold")
    table.add_column("On duty", style="green")
    table.add_column("Off duty", style="red")

    for hour, exchange in enumerate(roster.handover_report(day)):
        if not exchange.on_duty and not exchange.off_duty:
            continue
        table.add_row(
            _format_hour(hour),
            ", ".join(exchange.on_duty),
            ", ".join(exchange.off_duty),
        )

    return table
