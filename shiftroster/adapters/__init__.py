"""
Adapters layer - roster storage backends.
"""

from .json_store import JsonRosterStore

__all__ = ["JsonRosterStore"]
