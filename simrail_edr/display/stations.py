"""Station selection list with the dispatchers currently on duty."""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .window import add_hidden_row, visible_window


def format_station_row(board, station) -> str:
    """Format as "PREFIX Name - Dispatcher/Dispatcher", suffix only when staffed."""
    row = f"{station.prefix:<4} {station.name}"
    if station.dispatched_by:
        row += " - " + "/".join(board.dispatcher_names(station))
    return row


def build_station_list(board, max_rows: int = 20) -> Panel:
    """Build the station list. Staffed stations are shown in bold."""
    nav = board.navigator
    stations = nav.stations

    table = Table(show_header=False, box=None, expand=True, pad_edge=False)
    table.add_column("", width=2, justify="center")
    table.add_column("Station")

    if not stations:
        table.add_row("", Text("No stations available", style="dim italic"))

    start, end = visible_window(len(stations), nav.station_index, max_rows)
    add_hidden_row(table, start, "above")

    for i in range(start, end):
        station = stations[i]
        selected = i == nav.station_index
        style = "bold" if station.dispatched_by else ""
        if selected:
            style = f"{style} reverse".strip()
        table.add_row(
            Text("▶" if selected else "", style="bold cyan"),
            Text(format_station_row(board, station), style=style),
        )

    add_hidden_row(table, len(stations) - end, "below")

    return Panel(
        table,
        title=f"[bold]{nav.selected_server}/Station Selection[/]",
        border_style="magenta"
    )
