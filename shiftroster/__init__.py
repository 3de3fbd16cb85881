"""
shiftroster - hour-by-hour duty roster engine for multi-day events.
"""

__version__ = "0.1.0"
