"""Shared test fixtures and helpers for simrail-edr tests."""

import json
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest
from rich.console import Console

from simrail_edr.models import Server, Station, StopDescription, Train, PlayerIdentity


# =============================================================================
# Constants
# =============================================================================


# A fixed "now" for deterministic time-based tests
FIXED_NOW = datetime(2025, 3, 15, 10, 0, 0)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def freeze_time():
    """Patch _now to return FIXED_NOW for deterministic tests."""
    with patch("simrail_edr.models._now", return_value=FIXED_NOW), \
            patch("simrail_edr.dispatch._now", return_value=FIXED_NOW):
        yield


# =============================================================================
# Test data helpers
# =============================================================================


def at(hour: int, minute: int) -> datetime:
    """A time on FIXED_NOW's day."""
    return FIXED_NOW.replace(hour=hour, minute=minute)


def make_server(code="en1", name="EN1 (English)", is_active=True, id="1"):
    return Server(id=id, name=name, code=code, is_active=is_active)


def make_station(name="Katowice", prefix="KO", latitude=50.2577, longitude=19.0171, dispatched_by=()):
    return Station(
        name=name,
        prefix=prefix,
        latitude=latitude,
        longitude=longitude,
        dispatched_by=tuple(dispatched_by),
    )


def make_train(number="14122", name="ROJ", type="user", latitude=50.2577, longitude=19.0171):
    return Train(number=number, name=name, type=type, latitude=latitude, longitude=longitude)


def make_stop(
    station="Katowice",
    line="1",
    index=0,
    arr=None,
    dep=None,
    actual_arr=None,
    actual_dep=None,
    platform=None,
    track=None,
    is_stop=False,
):
    return StopDescription(
        station=station,
        line=line,
        index=index,
        scheduled_arrival=arr,
        scheduled_departure=dep,
        actual_arrival=actual_arr,
        actual_departure=actual_dep,
        platform=platform,
        track=track,
        is_stop=is_stop,
    )


def abcd_timetable(c_is_stop=True):
    """Timetable A -> B -> C -> D; C is the dispatch station."""
    return [
        make_stop("A", line="1", index=0, arr=at(9, 50), dep=at(9, 51)),
        make_stop("B", line="2", index=1, arr=at(9, 58), dep=at(9, 58)),
        make_stop(
            "C", line="3", index=2, arr=at(10, 5), dep=at(10, 8),
            platform="3" if c_is_stop else None, track=2 if c_is_stop else None,
            is_stop=c_is_stop,
        ),
        make_stop("D", line="4", index=3, arr=at(10, 15), dep=at(10, 16)),
    ]


def abcd_stations():
    """Stations A-D spaced a tenth of a degree apart along a meridian."""
    return [
        make_station(name, name, latitude=50.0 + 0.1 * i, longitude=19.0)
        for i, name in enumerate("ABCD")
    ]


class FakeClient:
    """Stands in for SimRailClient with canned records, recording every call."""

    def __init__(self, servers=None, stations=None, players=None, trains=None, timetables=None):
        self.servers = servers or []
        self.stations = stations or []
        self.players = players or []
        self.trains = trains or []
        self.timetables = timetables or {}
        self.calls = []
        self.fail_with = None

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if self.fail_with is not None:
            raise self.fail_with

    def fetch_servers(self):
        self._call("servers")
        return list(self.servers)

    def fetch_stations(self, server_code):
        self._call("stations", server_code)
        return list(self.stations)

    def fetch_players(self, steam_ids):
        if not steam_ids:
            return []
        self._call("players", tuple(steam_ids))
        return list(self.players)

    def fetch_trains(self, server_code):
        self._call("trains", server_code)
        # Fresh copies: the board mutates nearest_station on its own records
        return [
            Train(t.number, t.name, t.type, t.latitude, t.longitude)
            for t in self.trains
        ]

    def fetch_timetable(self, server_code, train_number):
        self._call("timetable", server_code, train_number)
        return list(self.timetables.get(train_number, []))


def make_player(steam_id="76561198000000001", name="Dispatcher One"):
    return PlayerIdentity(steam_id=steam_id, name=name)


def render_to_text(renderable, width=120) -> str:
    """Capture a Rich renderable as plain text for assertion."""
    console = Console(record=True, width=width, force_terminal=False)
    console.print(renderable)
    return console.export_text()


def load_fixture(name: str):
    """Load a JSON fixture file from tests/fixtures/."""
    fixture_path = Path(__file__).parent / "fixtures" / name
    with open(fixture_path, encoding="utf-8") as f:
        return json.load(f)


def make_mock_httpx_client(json_response):
    """Create a mock httpx.Client that returns the given JSON from .get()."""
    mock_response = MagicMock()
    mock_response.json.return_value = json_response
    mock_response.raise_for_status.return_value = None
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.get.return_value = mock_response
    return mock_client


def make_routing_httpx_client(responses: dict):
    """A mock httpx.Client answering each URL suffix with its own JSON payload."""
    def get(url, params=None):
        for suffix, payload in responses.items():
            if url.endswith(suffix):
                response = MagicMock()
                response.json.return_value = payload
                response.raise_for_status.return_value = None
                return response
        raise AssertionError(f"Unexpected request: {url}")

    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    mock_client.get.side_effect = get
    return mock_client


def minutes(n: int) -> timedelta:
    return timedelta(minutes=n)
