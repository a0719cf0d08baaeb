"""Display rendering components for simrail-edr."""

from .board import build_event_table, format_event_time
from .errors import build_error_panel, build_no_events_panel
from .footer import build_footer
from .servers import build_server_list
from .stations import build_station_list, format_station_row

__all__ = [
    "build_event_table",
    "format_event_time",
    "build_error_panel",
    "build_no_events_panel",
    "build_footer",
    "build_server_list",
    "build_station_list",
    "format_station_row",
]
