"""Name resolution strategies used to line up station names across feeds.

The live train feed, the station directory and the timetable services do not
always agree on how a station is spelled. A resolver turns any of those names
into a canonical key; two names match when their keys are equal.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from .errors import DispatchError
from .models import Station

logger = logging.getLogger(__name__)


class StationNameResolver:
    """Matches names verbatim. Used against the live panel timetables."""

    def station_key(self, station: Station) -> str:
        return station.name

    def resolve(self, name: str) -> str | None:
        return name or None


class PrefixResolver:
    """Matches names through a static name -> prefix table."""

    def __init__(self, table: Mapping[str, str]):
        entries = dict(table)
        # A prefix resolves to itself, so rows already keyed by prefix match too
        for prefix in table.values():
            entries.setdefault(prefix, prefix)
        self.table: Mapping[str, str] = MappingProxyType(entries)

    def station_key(self, station: Station) -> str:
        return station.prefix

    def resolve(self, name: str) -> str | None:
        return self.table.get(name)


def load_prefix_table(path: Path) -> Mapping[str, str]:
    """Load the station name -> prefix table from a JSON object file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DispatchError(f"Cannot load prefix table {path}: {e}") from e

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise DispatchError(f"Prefix table {path} must map station names to prefixes")

    logger.info("Loaded %d prefix mappings from %s", len(data), path)
    return MappingProxyType(data)
