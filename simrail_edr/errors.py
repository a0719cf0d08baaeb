"""Error kinds raised by the dispatch engine and its collaborators."""


class DispatchError(Exception):
    """Base class for every simrail-edr error."""


class NetworkFailure(DispatchError):
    """A fetch failed in transport or its payload could not be decoded."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url

    def __str__(self) -> str:
        message = super().__str__()
        if self.url:
            return f"{message} ({self.url})"
        return message


class NoStationsAvailable(DispatchError):
    """Nearest-station matching was asked to pick from an empty set."""


class MissingSelection(DispatchError):
    """An operation needed a selected station before one was chosen."""
