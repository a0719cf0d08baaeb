#!/usr/bin/env python3
"""
simrail-edr: SimRail dispatch board TUI

A terminal dashboard for SimRail dispatchers: pick a server, pick a station,
then watch a live, time-ordered list of trains passing, entering and leaving
that station.

Usage:
    simrail-edr                                  # Interactive selection
    simrail-edr --server en1                     # Start on en1's station list
    simrail-edr --server en1 --station Katowice  # Straight to the board
    simrail-edr --server en1 --station KO --once # Print the board once
    simrail-edr --source panel --prefix-table prefixes.json
"""

import argparse
import logging
import sys
from pathlib import Path
from time import monotonic

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.logging import RichHandler

from .api import SimRailClient
from .config import REFRESH_INTERVAL, SOURCE_EDR, TIMETABLE_SOURCES, Config
from .dispatch import DispatchBoard
from .display import (
    build_error_panel, build_event_table, build_footer,
    build_server_list, build_station_list,
)
from .errors import DispatchError
from .events import sort_events
from .keyboard import KeyReader, raw_terminal
from .navigation import Step
from .resolvers import PrefixResolver, StationNameResolver, load_prefix_table

logger = logging.getLogger(__name__)

# Panel borders plus the footer line
CHROME_ROWS = 4


def setup_logging(config: Config) -> None:
    """Send log records to a file if requested, otherwise to stderr via rich."""
    if config.verbose >= 2:
        level = logging.DEBUG
    elif config.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    if config.log_file:
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True
    )


def build_board(config: Config) -> DispatchBoard:
    """Create the client, the name resolver and the board from the config."""
    client = SimRailClient(timetable_source=config.timetable_source)
    if config.prefix_table:
        resolver = PrefixResolver(load_prefix_table(config.prefix_table))
    else:
        resolver = StationNameResolver()
    return DispatchBoard(client, resolver)


def build_display(board: DispatchBoard, height: int = 24) -> Layout:
    """Build the full screen for the active view."""
    max_rows = max(1, height - CHROME_ROWS)
    step = board.step

    if step == Step.SERVER_SELECTION:
        body = build_server_list(board, max_rows)
    elif step == Step.STATION_SELECTION:
        body = build_station_list(board, max_rows)
    else:
        # Sorted on every redraw; the refresh only rebuilds the collection
        board.events = sort_events(board.events)
        body = build_event_table(board, board.events)

    layout = Layout()
    layout.split(
        Layout(body, name="body", ratio=1),
        Layout(build_footer(board), name="footer", size=1),
    )
    return layout


def run(board: DispatchBoard, config: Config, console: Console) -> None:
    """
    Drive the dashboard until the user quits.

    Waits for a key for whatever is left of the refresh interval, refreshes
    when the interval has elapsed or a navigation step asks for it, and
    redraws when something changed. Refresh errors propagate to the caller.
    """
    keys = KeyReader()
    last_tick = monotonic()

    with raw_terminal(), Live(
        build_display(board, console.height),
        console=console,
        auto_refresh=False,
        screen=True,
    ) as live:
        while True:
            timeout = config.refresh_interval - (monotonic() - last_tick)
            key = keys.read(timeout)
            if key == "q":
                return

            need_refresh = need_redraw = False
            if key is not None:
                need_refresh, need_redraw = board.navigator.key_pressed(key)

            if need_refresh or monotonic() - last_tick >= config.refresh_interval:
                board.refresh()
                last_tick = monotonic()
                need_redraw = True

            if need_redraw:
                live.update(build_display(board, console.height), refresh=True)


def print_once(board: DispatchBoard, console: Console) -> None:
    console.print(build_event_table(board, sort_events(board.events)))


def parse_args(argv: list[str] | None = None) -> Config:
    parser = argparse.ArgumentParser(
        description="Live SimRail dispatch board for a single station",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s                                  # Pick server and station interactively
    %(prog)s --server en1                     # Start on en1's station list
    %(prog)s --server en1 --station Katowice  # Open the board directly
    %(prog)s --server en1 --station KO --once # Print the board once and exit
    %(prog)s --source panel --prefix-table prefixes.json

Keys: Up/Down (or k/j) move, Enter selects, Esc goes back, q quits.
Trains marked * are driven by players.
        """
    )
    parser.add_argument(
        "-r", "--refresh",
        type=int,
        default=REFRESH_INTERVAL,
        help=f"Refresh interval in seconds (default: {REFRESH_INTERVAL})"
    )
    parser.add_argument(
        "--source",
        choices=TIMETABLE_SOURCES,
        default=SOURCE_EDR,
        help="Timetable service to read schedules from (default: edr)"
    )
    parser.add_argument(
        "--prefix-table",
        type=Path,
        metavar="PATH",
        help="JSON file mapping station names to prefixes; match stations by prefix"
    )
    parser.add_argument(
        "--server",
        metavar="CODE",
        help="Server code to select on start-up (e.g., en1)"
    )
    parser.add_argument(
        "--station",
        metavar="NAME",
        help="Station name or prefix to select on start-up (needs --server)"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print the dispatch board once and exit (needs --server and --station)"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Write log records to this file instead of stderr"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log more (-v info, -vv debug)"
    )

    args = parser.parse_args(argv)

    if args.station and not args.server:
        parser.error("--station requires --server")
    if args.once and not (args.server and args.station):
        parser.error("--once requires --server and --station")
    if args.refresh <= 0:
        parser.error("--refresh must be a positive number of seconds")

    return Config(
        refresh_interval=args.refresh,
        timetable_source=args.source,
        prefix_table=args.prefix_table,
        server=args.server,
        station=args.station,
        once=args.once,
        log_file=args.log_file,
        verbose=args.verbose,
    )


def main():
    config = parse_args()
    setup_logging(config)
    console = Console()

    try:
        board = build_board(config)
        if config.server:
            console.print(f"[dim]Connecting to {config.server}...[/]")
            board.preselect(config.server, config.station)
        else:
            board.refresh()

        if config.once:
            print_once(board, console)
            return

        run(board, config, console)
    except DispatchError as e:
        # The terminal mode and screen are already restored at this point
        logger.error("Dispatch board stopped: %s", e)
        console.print(build_error_panel(str(e)))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[dim]Dispatch board closed.[/]")
        sys.exit(0)


if __name__ == "__main__":
    main()
