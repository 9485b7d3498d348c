"""Geocoin-specific exception hierarchy."""

import geocoin


class GeocoinError(Exception):
    """Base class for all Geocoin-specific exceptions.

    It automatically prefixes the Geocoin version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.geocoin_version = getattr(geocoin, "__version__", "unknown")
        # Store the original message cleanly for programmatic access
        self.original_message = message
        full_message = f"[Geocoin {self.geocoin_version}] {message}"
        super().__init__(full_message)


class ConfigurationError(GeocoinError, ValueError):
    """Raised when grid or scenario parameters are invalid or missing."""

    def __init__(self, param_name: str, reason: str):
        self.param_name = param_name
        self.reason = reason
        super().__init__(f"Invalid configuration for '{param_name}': {reason}")


class ScenarioLockedError(GeocoinError):
    """Raised when a scenario is mutated after being bound to a session."""


# Cache Errors
class CacheError(GeocoinError):
    """Generic errors related to caches and their snapshots."""


class NoCacheError(CacheError, LookupError):  # noqa: N818
    """Raised when a cell has no cache.

    This is an expected condition: the spawn test failed for the cell, or its
    snapshot could not be restored. Callers skip the cell and carry on.
    """

    def __init__(self, cell):
        self.cell = cell
        super().__init__(f"No cache exists at cell {cell.key}.")


class CorruptSnapshotError(CacheError):
    """Raised when a persisted snapshot does not decode into a cache."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Snapshot for cell {key} is corrupt: {reason}")


class CoinDecodeError(CacheError, ValueError):
    """Raised when a coin identifier does not decode into ``i:j#serial``."""

    def __init__(self, text):
        self.text = text
        super().__init__(f"Cannot decode coin identifier {text!r}.")
