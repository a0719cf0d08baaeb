"""Dispatch board: the time-ordered event table for the selected station."""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Event, EventKind
from .errors import build_no_events_panel

KIND_LABELS = {
    EventKind.PASSING: "",
    EventKind.ENTERING: "IN",
    EventKind.DEPARTING: "OUT",
}


def format_event_time(event: Event) -> Text:
    """Effective time, with the delay against the plan when it is known."""
    text = Text(event.display_time)
    delay = event.delay_minutes
    if delay is None:
        text.stylize("cyan")
    elif delay > 0:
        text.append(f" +{delay}m", style="red")
    elif delay < 0:
        text.append(f" {delay}m", style="green")
    return text


def build_event_table(board, events: list[Event]) -> Panel:
    """Build the event table. Events must already be sorted."""
    nav = board.navigator
    title = f"[bold] {nav.selected_server}/{nav.station.name} [/]"

    if not events:
        return build_no_events_panel(title)

    table = Table(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
        expand=True,
    )

    table.add_column("", width=2, justify="center")
    table.add_column("Train", ratio=3)
    table.add_column("", width=4, justify="center")
    table.add_column("Time", width=11)
    table.add_column("From", ratio=3)
    table.add_column("To", ratio=3)

    for event in events:
        table.add_row(
            Text("*" if event.is_player else "", style="bold yellow"),
            Text(event.train, style="bold" if event.is_player else ""),
            Text(KIND_LABELS[event.kind], style="cyan"),
            format_event_time(event),
            event.prev,
            event.next,
        )

    return Panel(
        table,
        title=title,
        border_style="green"
    )
