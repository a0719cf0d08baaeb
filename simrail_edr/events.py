"""Dispatch event synthesis and ordering."""

from collections.abc import Iterable, Sequence

from .config import NOT_A_PLATFORM_STOP
from .models import Event, EventKind, StopDescription, Train


def _line_label(stop: StopDescription, line: str) -> str:
    return f"{stop.station}/L.{line}"


def synthesize(
    train: Train, timetable: Sequence[StopDescription], target_index: int
) -> list[Event]:
    """
    Build the events a train produces at the dispatch station.

    A pass-through point yields one PASSING event, a platform stop yields
    ENTERING followed by DEPARTING. Neighbouring rows clamp to the target row
    itself at either end of the timetable.

    A row with neither a scheduled arrival nor a scheduled departure has no
    planned time to report and yields nothing.
    """
    stop = timetable[target_index]
    prev_stop = timetable[target_index - 1] if target_index > 0 else stop
    next_stop = timetable[target_index + 1] if target_index + 1 < len(timetable) else stop

    planned_arrival = stop.scheduled_arrival or stop.scheduled_departure
    planned_departure = stop.scheduled_departure or stop.scheduled_arrival
    if planned_arrival is None or planned_departure is None:
        return []

    if not stop.is_stop:
        return [
            Event(
                train=train.label,
                kind=EventKind.PASSING,
                time=stop.actual_arrival,
                planned_time=planned_arrival,
                prev=_line_label(prev_stop, prev_stop.line),
                # Leaves on the line it passes through on, not the next row's
                next=_line_label(next_stop, stop.line),
                is_player=train.is_player,
            )
        ]

    platform_track = stop.platform_track
    return [
        Event(
            train=train.label,
            kind=EventKind.ENTERING,
            time=stop.actual_arrival,
            planned_time=planned_arrival,
            prev=_line_label(prev_stop, prev_stop.line),
            next=platform_track or NOT_A_PLATFORM_STOP,
            is_player=train.is_player,
        ),
        Event(
            train=train.label,
            kind=EventKind.DEPARTING,
            time=stop.actual_departure,
            planned_time=planned_departure,
            prev=platform_track or "",
            next=_line_label(next_stop, next_stop.line),
            is_player=train.is_player,
        ),
    ]


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Order events by effective time. Equal times keep their input order."""
    return sorted(events, key=lambda e: e.effective_time)
