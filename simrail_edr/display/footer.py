"""Key hints and refresh status line."""

from rich.text import Text

from ..navigation import Step

KEY_HINTS = {
    Step.SERVER_SELECTION: "↑/↓ move  Enter select  q quit",
    Step.STATION_SELECTION: "↑/↓ move  Enter select  Esc back  q quit",
    Step.DISPATCH: "Esc back  q quit",
}


def build_footer(board) -> Text:
    footer = Text(KEY_HINTS[board.step], style="dim")
    if board.last_refresh:
        footer.append(f" | Updated {board.last_refresh.strftime('%H:%M:%S')}", style="dim")
    return footer
