"""Nearest-station matching by great-circle distance."""

import math
from collections.abc import Iterable

from .errors import NoStationsAvailable
from .models import Station

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))


def nearest_station(
    latitude: float, longitude: float, stations: Iterable[Station]
) -> tuple[Station, float]:
    """
    Find the station closest to a position.
    Returns (station, distance_km). On an exact distance tie the station
    listed first wins.
    """
    best: tuple[Station, float] | None = None

    for station in stations:
        distance = haversine_km(latitude, longitude, station.latitude, station.longitude)
        # Strictly smaller only: equal distances keep the earlier candidate
        if best is None or distance < best[1]:
            best = (station, distance)

    if best is None:
        raise NoStationsAvailable("No stations to match the train position against")
    return best
