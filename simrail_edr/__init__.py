"""simrail-edr: live dispatch board for SimRail stations."""

__version__ = "0.1.0"
