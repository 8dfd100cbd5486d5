"""Custom exceptions for dryer-occupancy."""


class DryerOccupancyError(Exception):
    """Base exception for dryer-occupancy."""

    pass


class ConfigurationError(DryerOccupancyError, ValueError):
    """Raised when a detector or accessory is built from malformed configuration.

    Configuration errors are fatal: no detector instance is created.
    """

    pass
