"""Locate a train's current position and the dispatch station in its timetable."""

from collections.abc import Sequence
from typing import NamedTuple

from .models import StopDescription
from .resolvers import PrefixResolver, StationNameResolver


class Alignment(NamedTuple):
    anchor_index: int
    target_index: int

    @property
    def is_ahead(self) -> bool:
        """True while the train has not yet passed the dispatch station."""
        return self.anchor_index <= self.target_index


def find_row(
    timetable: Sequence[StopDescription],
    key: str,
    resolver: StationNameResolver | PrefixResolver,
) -> int | None:
    """Index of the first row whose resolved station key equals key."""
    for i, stop in enumerate(timetable):
        # Rows the resolver cannot map never match
        if resolver.resolve(stop.station) == key:
            return i
    return None


def align(
    timetable: Sequence[StopDescription],
    anchor_key: str,
    target_key: str,
    resolver: StationNameResolver | PrefixResolver,
) -> Alignment | None:
    """
    Find the anchor (nearest station) and the target (dispatch station) rows.
    Returns None unless both appear in the timetable.
    """
    anchor_index = find_row(timetable, anchor_key, resolver)
    if anchor_index is None:
        return None

    target_index = find_row(timetable, target_key, resolver)
    if target_index is None:
        return None

    return Alignment(anchor_index, target_index)
