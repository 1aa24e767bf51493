"""
Exception types raised by Kolibri Bot.
"""


class KolibriBotError(Exception):
    """Base class for all bot errors."""


class ConfigurationError(KolibriBotError):
    """Required configuration is missing or invalid. Fatal at startup."""


class ExplorerAPIError(KolibriBotError):
    """The block explorer answered with an HTTP error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class DataShapeError(KolibriBotError):
    """An upstream payload is missing a field we rely on."""


class OwnerResolutionError(DataShapeError):
    """The owner of an oven could not be determined."""


class DuplicateWatcherError(KolibriBotError):
    """A watcher for this contract address is already running."""
