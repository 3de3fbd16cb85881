"""
Domain-specific exception hierarchy for the roster engine.

A rejected hour range is not an error: mutators report it by returning
``False`` or an empty list. Everything below is raised for input the caller
should have validated, or for state that can no longer be trusted.
"""


class RosterError(Exception):
    """Base class for all roster engine errors."""


class InvalidTimeFormat(RosterError, ValueError):
    """Raised when a compact time string is not 10, 12 or 14 digits of a real date."""


class InvalidEventWindow(RosterError, ValueError):
    """Raised when an event end does not come after its start."""


class DayOutOfBounds(RosterError, IndexError):
    """Raised when a day index falls outside the roster."""


class HourOutOfBounds(RosterError, IndexError):
    """Raised when an hour index falls outside 0..23."""


class NormalizationError(RosterError):
    """Raised when the column normalizer exceeds its swap budget."""


class RosterStateError(RosterError, ValueError):
    """Raised when serialized roster data cannot be reconstructed."""
