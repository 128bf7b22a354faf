"""
Pawtrack exception hierarchy.

All pawtrack exceptions inherit from PawtrackError. Only the outer layers
(configuration, event-file reading, CLI) raise them; the timeline engine
resolves degenerate input to empty results instead.
"""


class PawtrackError(Exception):
    """Base exception class for all pawtrack errors."""


class ConfigurationError(PawtrackError):
    """Raised for configuration errors (missing keys, invalid values)."""


class EventLogError(PawtrackError):
    """Raised when an event log file cannot be read or parsed."""
