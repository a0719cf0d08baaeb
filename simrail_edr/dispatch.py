"""The dispatch board: owns the fetched data and derives dispatch events."""

import logging
from datetime import datetime

from .api import SimRailClient
from .errors import DispatchError, MissingSelection, NoStationsAvailable
from .events import synthesize
from .geo import nearest_station
from .models import Event, PlayerIdentity, Station, Train, _now
from .navigation import Navigator, Step
from .resolvers import PrefixResolver, StationNameResolver
from .timetable import align

logger = logging.getLogger(__name__)


class DispatchBoard:
    """
    Single owner of the server, station, player, train and event collections.

    A refresh fetches whatever the active view needs and commits it only once
    every request has succeeded, so a failed refresh leaves the previous data
    on screen. Refreshes must never overlap; the driving loop serializes them.
    """

    def __init__(
        self,
        client: SimRailClient,
        resolver: StationNameResolver | PrefixResolver | None = None,
    ):
        self.client = client
        self.resolver = resolver or StationNameResolver()
        self.navigator = Navigator()
        self.players: list[PlayerIdentity] = []
        self.trains: list[Train] = []
        self.events: list[Event] = []
        self.last_refresh: datetime | None = None

    @property
    def step(self) -> Step:
        return self.navigator.step

    def refresh(self) -> None:
        """Fetch data for the active view. Raises NetworkFailure on any fetch error."""
        step = self.navigator.step
        if step == Step.SERVER_SELECTION:
            self._refresh_servers()
        elif step == Step.STATION_SELECTION:
            self._refresh_stations()
        else:
            self._refresh_events()
        self.last_refresh = _now()

    def _refresh_servers(self) -> None:
        servers = self.client.fetch_servers()
        self.navigator.set_servers(servers)
        logger.info("Loaded %d servers", len(servers))

    def _refresh_stations(self) -> None:
        server = self.navigator.selected_server
        if server is None:
            raise MissingSelection("No server has been selected")

        stations = sorted(self.client.fetch_stations(server), key=lambda s: s.name)
        steam_ids = [steam_id for s in stations for steam_id in s.dispatched_by]
        players = self.client.fetch_players(steam_ids)

        self.navigator.set_stations(stations)
        self.players = players
        logger.info("Loaded %d stations and %d dispatchers on %s", len(stations), len(players), server)

    def _refresh_events(self) -> None:
        station = self.navigator.station
        server = self.navigator.selected_server
        target_key = self.resolver.station_key(station)

        trains = self.client.fetch_trains(server)
        events: list[Event] = []
        for train in trains:
            events.extend(self._train_events(server, train, target_key))

        # Rebuilt from scratch every cycle, never merged with the last batch
        self.trains = trains
        self.events = events
        logger.info(
            "Derived %d events from %d trains for %s/%s",
            len(events), len(trains), server, station.name,
        )

    def _train_events(self, server: str, train: Train, target_key: str) -> list[Event]:
        try:
            anchor, distance = nearest_station(
                train.latitude, train.longitude, self.navigator.stations
            )
        except NoStationsAvailable:
            logger.debug("No stations loaded, skipping train %s", train.number)
            return []
        train.nearest_station = anchor.name

        timetable = self.client.fetch_timetable(server, train.number)
        alignment = align(
            timetable, self.resolver.station_key(anchor), target_key, self.resolver
        )
        if alignment is None:
            logger.debug(
                "Train %s near %s (%.1f km) does not call at the dispatch station",
                train.number, anchor.name, distance,
            )
            return []
        if not alignment.is_ahead:
            logger.debug("Train %s has already passed the dispatch station", train.number)
            return []

        return synthesize(train, timetable, alignment.target_index)

    def get_player_name(self, steam_id: str | None) -> str | None:
        if steam_id is None:
            return None
        for player in self.players:
            if player.steam_id == steam_id:
                return player.name
        return None

    def dispatcher_names(self, station: Station) -> list[str]:
        """Display names of a station's dispatchers, skipping unknown ids."""
        names = []
        for steam_id in station.dispatched_by:
            name = self.get_player_name(steam_id)
            if name is not None:
                names.append(name)
        return names

    def preselect(self, server_code: str, station_name: str | None = None) -> None:
        """Walk the selection flow to a server (and station) given up front."""
        nav = self.navigator
        self.refresh()
        codes = [s.code for s in nav.servers]
        if server_code not in codes:
            raise DispatchError(f"Unknown server code: {server_code}")
        nav.server_index = codes.index(server_code)
        nav.select()
        self.refresh()

        if station_name is None:
            return

        for i, station in enumerate(nav.stations):
            if station_name in (station.name, station.prefix):
                nav.station_index = i
                break
        else:
            raise DispatchError(f"Unknown station on {server_code}: {station_name}")
        nav.select()
        self.refresh()
