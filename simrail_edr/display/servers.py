"""Server selection list."""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .window import add_hidden_row, visible_window


def build_server_list(board, max_rows: int = 20) -> Panel:
    """Build the server list, striking through inactive servers."""
    nav = board.navigator
    servers = nav.servers

    table = Table(show_header=False, box=None, expand=True, pad_edge=False)
    table.add_column("", width=2, justify="center")
    table.add_column("Server")

    if not servers:
        table.add_row("", Text("No servers available", style="dim italic"))

    start, end = visible_window(len(servers), nav.server_index, max_rows)
    add_hidden_row(table, start, "above")

    for i in range(start, end):
        server = servers[i]
        selected = i == nav.server_index
        style = "dim strike" if not server.is_active else ""
        if selected:
            style = f"{style} reverse".strip()
        table.add_row(
            Text("▶" if selected else "", style="bold cyan"),
            Text(f"{server.code} {server.name}", style=style),
        )

    add_hidden_row(table, len(servers) - end, "below")

    return Panel(
        table,
        title="[bold]Server Selection[/]",
        border_style="cyan"
    )
