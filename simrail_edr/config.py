"""Configuration constants and dataclass for simrail-edr."""

from dataclasses import dataclass
from pathlib import Path

# API constants
PANEL_API_BASE = "https://panel.simrail.eu:8084"
EDR_API_BASE = "https://simrail-edr.emeraldnetwork.xyz"
REFRESH_INTERVAL = 5  # seconds
HTTP_TIMEOUT = 10.0  # seconds

# Timetable backends
SOURCE_EDR = "edr"
SOURCE_PANEL = "panel"
TIMETABLE_SOURCES = (SOURCE_EDR, SOURCE_PANEL)

# Train feed
BOT_TYPE = "bot"

# Label used when a platform stop has no platform/track assigned
NOT_A_PLATFORM_STOP = "Not a platform stop!"


@dataclass
class Config:
    """Runtime configuration built from CLI arguments."""
    refresh_interval: int = REFRESH_INTERVAL
    timetable_source: str = SOURCE_EDR
    prefix_table: Path | None = None
    server: str | None = None
    station: str | None = None
    once: bool = False
    log_file: Path | None = None
    verbose: int = 0
