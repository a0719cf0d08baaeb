"""API communication for the SimRail panel and timetable services."""

import logging
from typing import Any

import httpx

from .config import EDR_API_BASE, HTTP_TIMEOUT, PANEL_API_BASE, SOURCE_EDR, SOURCE_PANEL
from .errors import NetworkFailure
from .models import PlayerIdentity, Server, Station, StopDescription, Train, unwrap_data

logger = logging.getLogger(__name__)


class SimRailClient:
    """Fetches servers, stations, players, trains and timetables.

    Every call is a single blocking request. Transport errors and bodies that
    cannot be decoded are raised as NetworkFailure; nothing is retried.
    """

    def __init__(
        self,
        panel_base: str = PANEL_API_BASE,
        edr_base: str = EDR_API_BASE,
        timetable_source: str = SOURCE_EDR,
        timeout: float = HTTP_TIMEOUT,
    ):
        if timetable_source not in (SOURCE_EDR, SOURCE_PANEL):
            raise ValueError(f"Unknown timetable source: {timetable_source}")
        self.panel_base = panel_base.rstrip("/")
        self.edr_base = edr_base.rstrip("/")
        self.timetable_source = timetable_source
        self.timeout = timeout

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        logger.debug("GET %s %s", url, params or "")
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(f"HTTP {e.response.status_code}", url) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(str(e) or type(e).__name__, url) from e
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            raise NetworkFailure(f"Invalid JSON: {e}", url) from e

    def fetch_servers(self) -> list[Server]:
        payload = self._get_json(f"{self.panel_base}/servers-open")
        return [Server.from_api(s) for s in unwrap_data(payload, "server")]

    def fetch_stations(self, server_code: str) -> list[Station]:
        payload = self._get_json(
            f"{self.panel_base}/stations-open", params={"serverCode": server_code}
        )
        return [Station.from_api(s) for s in unwrap_data(payload, "station")]

    def fetch_players(self, steam_ids: list[str]) -> list[PlayerIdentity]:
        """Look up display names. An empty id list makes no request."""
        if not steam_ids:
            return []
        payload = self._get_json(f"{self.panel_base}/users-open/{','.join(steam_ids)}")
        return [PlayerIdentity.from_api(p) for p in unwrap_data(payload, "player")]

    def fetch_trains(self, server_code: str) -> list[Train]:
        payload = self._get_json(
            f"{self.panel_base}/trains-open", params={"serverCode": server_code}
        )
        return [Train.from_api(t) for t in unwrap_data(payload, "train")]

    def fetch_timetable(self, server_code: str, train_number: str) -> list[StopDescription]:
        """Fetch one train's timetable in schedule order."""
        if self.timetable_source == SOURCE_EDR:
            payload = self._get_json(f"{self.edr_base}/train/{server_code}/{train_number}")
            if not isinstance(payload, list):
                raise NetworkFailure("Malformed timetable response: expected a list")
            stops = [StopDescription.from_edr(row) for row in payload]
            return sorted(stops, key=lambda s: s.index)

        payload = self._get_json(
            f"{self.panel_base}/timetable-open",
            params={"serverCode": server_code, "train": train_number},
        )
        return [
            StopDescription.from_panel(row, i)
            for i, row in enumerate(unwrap_data(payload, "timetable"))
        ]
