"""Data model for servers, stations, trains and timetables, plus time helpers.

Every record is built from the raw API payload by a classmethod parser. The
parsers are the only place that knows the feed's field names; anything
malformed is reported as NetworkFailure right there.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from .config import BOT_TYPE
from .errors import NetworkFailure


# Clock-only timetable times further behind now than this are for tomorrow
CLOCK_ROLLOVER = timedelta(hours=12)


def _now():
    """Current local time. Extracted for test patching."""
    return datetime.now()


def parse_time(time_val: str | None) -> datetime | None:
    """Parse an ISO 8601 time string from the API."""
    if not time_val or not isinstance(time_val, str):
        return None

    try:
        return datetime.fromisoformat(time_val.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def parse_clock(clock: str | None) -> datetime | None:
    """
    Parse an "HH:MM" (or "HH:MM:SS") timetable string as a time today.

    A time more than CLOCK_ROLLOVER behind now belongs to tomorrow, so a
    timetable running past midnight keeps its order.
    """
    if not clock or not isinstance(clock, str):
        return None

    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            parsed = datetime.strptime(clock.strip(), fmt)
        except ValueError:
            continue
        now = _now()
        anchored = now.replace(
            hour=parsed.hour, minute=parsed.minute, second=parsed.second, microsecond=0
        )
        if now - anchored > CLOCK_ROLLOVER:
            anchored += timedelta(days=1)
        return anchored
    return None


def format_time(dt: datetime | None) -> str:
    """Format datetime for display."""
    if not dt:
        return "—"
    return dt.strftime("%H:%M")


# =============================================================================
# Boundary validation
# =============================================================================


def _require(payload: Any, key: str, kind: type | tuple[type, ...], record: str) -> Any:
    """Return payload[key], raising NetworkFailure if it is missing or mistyped."""
    if not isinstance(payload, dict):
        raise NetworkFailure(f"Malformed {record} record: expected an object")
    value = payload.get(key)
    if value is None:
        raise NetworkFailure(f"Malformed {record} record: missing {key!r}")
    if not isinstance(value, kind):
        raise NetworkFailure(f"Malformed {record} record: {key!r} has type {type(value).__name__}")
    return value


def _optional(payload: Any, key: str, kind: type | tuple[type, ...], record: str) -> Any:
    if isinstance(payload, dict) and payload.get(key) is None:
        return None
    return _require(payload, key, kind, record)


def _coordinate(payload: Any, keys: tuple[str, ...], record: str) -> float:
    # The live feed spells some coordinate keys "Latititude"/"Latititute"
    for key in keys:
        if isinstance(payload, dict) and payload.get(key) is not None:
            return float(_require(payload, key, (int, float), record))
    raise NetworkFailure(f"Malformed {record} record: missing {keys[0]!r}")


def unwrap_data(payload: Any, record: str) -> list:
    """Extract the list from a panel response envelope ``{"data": [...]}``."""
    return _require(payload, "data", list, f"{record} response")


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class Server:
    id: str
    name: str
    code: str
    is_active: bool

    @classmethod
    def from_api(cls, payload: Any) -> "Server":
        return cls(
            id=str(_optional(payload, "id", (str, int), "server") or ""),
            name=_require(payload, "ServerName", str, "server"),
            code=_require(payload, "ServerCode", str, "server"),
            is_active=_require(payload, "IsActive", bool, "server"),
        )


@dataclass(frozen=True)
class Station:
    name: str
    prefix: str
    latitude: float
    longitude: float
    dispatched_by: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: Any) -> "Station":
        dispatchers = _optional(payload, "DispatchedBy", list, "station") or []
        return cls(
            name=_require(payload, "Name", str, "station"),
            prefix=_require(payload, "Prefix", str, "station"),
            latitude=_coordinate(payload, ("Latititude", "Latitude"), "station"),
            longitude=_coordinate(payload, ("Longitude",), "station"),
            dispatched_by=tuple(
                _require(d, "SteamId", str, "dispatcher") for d in dispatchers
            ),
        )


@dataclass
class Train:
    number: str
    name: str
    type: str
    latitude: float
    longitude: float
    # Set by the geolocation matcher, once per refresh cycle
    nearest_station: str | None = None

    @property
    def label(self) -> str:
        return f"{self.name} {self.number}"

    @property
    def is_player(self) -> bool:
        return self.type != BOT_TYPE

    @classmethod
    def from_api(cls, payload: Any) -> "Train":
        data = _require(payload, "TrainData", dict, "train")
        return cls(
            number=str(_require(payload, "TrainNoLocal", (str, int), "train")),
            name=_require(payload, "TrainName", str, "train"),
            type=_require(payload, "Type", str, "train"),
            latitude=_coordinate(data, ("Latititute", "Latitude"), "train"),
            longitude=_coordinate(data, ("Longitute", "Longitude"), "train"),
        )


@dataclass(frozen=True)
class StopDescription:
    """One row of a train's timetable."""

    station: str
    line: str
    index: int
    scheduled_arrival: datetime | None = None
    scheduled_departure: datetime | None = None
    actual_arrival: datetime | None = None
    actual_departure: datetime | None = None
    platform: str | None = None
    track: int | None = None
    is_stop: bool = False

    @property
    def platform_track(self) -> str | None:
        """The "platform/track" hint, or None unless both are known."""
        if self.platform is None or self.track is None:
            return None
        return f"{self.platform}/{self.track}"

    @classmethod
    def from_edr(cls, payload: Any) -> "StopDescription":
        """Parse a row from the EDR timetable service."""
        record = "timetable"
        planned_stop = _optional(payload, "plannedStop", int, record) or 0

        # The *Object fields are always populated; the *Time fields say
        # whether an actual time has been recorded yet.
        actual_arrival = None
        if payload.get("actualArrivalTime") is not None:
            actual_arrival = parse_time(payload.get("actualArrivalObject"))
        actual_departure = None
        if payload.get("actualDepartureTime") is not None:
            actual_departure = parse_time(payload.get("actualDepartureObject"))

        platform = _optional(payload, "platform", (str, int), record)
        return cls(
            station=_require(payload, "nameOfPoint", str, record),
            line=str(_require(payload, "line", (str, int), record)),
            index=_require(payload, "indexOfPoint", int, record),
            scheduled_arrival=parse_time(payload.get("scheduledArrivalObject")),
            scheduled_departure=parse_time(payload.get("scheduledDepartureObject")),
            actual_arrival=actual_arrival,
            actual_departure=actual_departure,
            platform=str(platform) if platform is not None else None,
            track=_optional(payload, "track", int, record),
            is_stop=planned_stop != 0,
        )

    @classmethod
    def from_panel(cls, payload: Any, index: int) -> "StopDescription":
        """Parse a row from the panel timetable, positioned by insertion order."""
        record = "timetable"
        platform = _optional(payload, "platform", (str, int), record)
        return cls(
            station=_require(payload, "station", str, record),
            line=str(_require(payload, "line", (str, int), record)),
            index=index,
            scheduled_arrival=parse_clock(payload.get("scheduled_arrival_hour")),
            scheduled_departure=parse_clock(payload.get("scheduled_departure_hour")),
            platform=str(platform) if platform is not None else None,
            track=_optional(payload, "track", int, record),
            is_stop=bool(payload.get("stop_type")),
        )


@dataclass(frozen=True)
class PlayerIdentity:
    steam_id: str
    name: str

    @classmethod
    def from_api(cls, payload: Any) -> "PlayerIdentity":
        steam_id = _require(payload, "SteamId", str, "player")
        info = _optional(payload, "SteamInfo", list, "player") or []
        if info:
            name = _require(info[0], "personaname", str, "player")
        else:
            name = steam_id
        return cls(steam_id=steam_id, name=name)


class EventKind(Enum):
    PASSING = "passing"
    ENTERING = "entering"
    DEPARTING = "departing"


@dataclass(frozen=True)
class Event:
    """A single dispatch occurrence derived from a timetable row."""

    train: str
    kind: EventKind
    time: datetime | None
    planned_time: datetime
    prev: str
    next: str
    is_player: bool

    @property
    def effective_time(self) -> datetime:
        return self.time or self.planned_time

    @property
    def delay_minutes(self) -> int | None:
        """Whole minutes between actual and planned time, None if not yet known."""
        if self.time is None:
            return None
        return int((self.time - self.planned_time).total_seconds() / 60)

    @property
    def display_time(self) -> str:
        return format_time(self.effective_time)
