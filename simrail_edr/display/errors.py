"""Error and empty-state display panels."""

from rich.panel import Panel
from rich.text import Text


def build_error_panel(error: str) -> Panel:
    """Build an error display panel."""
    return Panel(
        Text(f"Error: {error}", style="bold red"),
        title="[bold red]Error[/]",
        border_style="red"
    )


def build_no_events_panel(title: str) -> Panel:
    """Build the dispatch panel shown while no train is heading for the station."""
    content = Text()
    content.append("No trains are currently heading for this station.\n\n", style="bold yellow")
    content.append("This could mean:\n", style="white")
    content.append("• No timetable on this server calls at the station\n", style="dim")
    content.append("• Every train has already passed it\n", style="dim")
    content.append("• Trains are too far away to be matched yet\n", style="dim")
    content.append("\nThe board refreshes automatically.", style="white")

    return Panel(
        content,
        title=title,
        border_style="yellow"
    )
