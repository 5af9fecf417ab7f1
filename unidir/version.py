"""Version information for the University Directory API."""

__version__ = "0.1.0"
