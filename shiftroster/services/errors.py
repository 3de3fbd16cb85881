"""
Errors raised by the service and storage layers.
"""

from ..domain.exceptions import RosterError


class RosterNotFoundError(RosterError, LookupError):
    """Raised when no roster is stored under the requested name."""


class RosterExistsError(RosterError):
    """Raised when creating a roster under a name that is already taken."""


class InvalidSegmentError(RosterError, ValueError):
    """Raised when a command carries no usable hour segment."""


class RosterStoreError(RosterError):
    """Raised when roster storage cannot be read or written."""
