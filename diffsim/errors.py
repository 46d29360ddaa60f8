from __future__ import annotations


class SimulationError(Exception):
    """Base class for simulator errors."""


class ConfigurationError(SimulationError, ValueError):
    """Raised when startup configuration is invalid.

    The simulator refuses to construct itself from such a configuration,
    so no partially initialized object ever reaches the host.
    """
