"""Three-step selection flow: server -> station -> dispatch view."""

from enum import Enum
from typing import NamedTuple

from .errors import MissingSelection
from .models import Server, Station


class Step(Enum):
    SERVER_SELECTION = "server"
    STATION_SELECTION = "station"
    DISPATCH = "dispatch"


class Transition(NamedTuple):
    """What the driving loop has to do after a navigation input."""
    refresh: bool
    redraw: bool


NOTHING = Transition(refresh=False, redraw=False)
REDRAW = Transition(refresh=False, redraw=True)
REFRESH_AND_REDRAW = Transition(refresh=True, redraw=True)


class Navigator:
    """Tracks the active view, the fetched lists and the cursor in each."""

    def __init__(self):
        self.step = Step.SERVER_SELECTION
        self.servers: list[Server] = []
        self.server_index = 0
        self.selected_server: str | None = None
        self.stations: list[Station] = []
        self.station_index = 0
        self.selected_station: Station | None = None

    @property
    def station(self) -> Station:
        """The selected dispatch station."""
        if self.selected_station is None:
            raise MissingSelection("No dispatch station has been selected")
        return self.selected_station

    def key_pressed(self, key: str) -> Transition:
        if key == "enter":
            return self.select()
        if key in ("up", "k"):
            return self.cursor(-1)
        if key in ("down", "j"):
            return self.cursor(1)
        if key == "esc":
            return self.back()
        return NOTHING

    def select(self) -> Transition:
        if self.step == Step.SERVER_SELECTION:
            if not self.servers:
                return NOTHING
            self.selected_server = self.servers[self.server_index].code
            self.station_index = 0
            self.step = Step.STATION_SELECTION
            return REFRESH_AND_REDRAW

        if self.step == Step.STATION_SELECTION:
            if not self.stations:
                return NOTHING
            self.selected_station = self.stations[self.station_index]
            self.step = Step.DISPATCH
            return REFRESH_AND_REDRAW

        return NOTHING

    def back(self) -> Transition:
        # Lists fetched earlier stay valid, so going back never refetches
        if self.step == Step.DISPATCH:
            self.step = Step.STATION_SELECTION
            return REDRAW
        if self.step == Step.STATION_SELECTION:
            self.step = Step.SERVER_SELECTION
            return REDRAW
        return NOTHING

    def cursor(self, delta: int) -> Transition:
        if self.step == Step.SERVER_SELECTION:
            if not self.servers:
                return NOTHING
            self.server_index = (self.server_index + delta) % len(self.servers)
            return REDRAW

        if self.step == Step.STATION_SELECTION:
            if not self.stations:
                return NOTHING
            self.station_index = (self.station_index + delta) % len(self.stations)
            return REDRAW

        return NOTHING

    def set_servers(self, servers: list[Server]) -> None:
        self.servers = servers
        if self.server_index >= len(servers):
            self.server_index = 0

    def set_stations(self, stations: list[Station]) -> None:
        self.stations = stations
        if self.station_index >= len(stations):
            self.station_index = 0
