"""Directory API configuration management.

Provides configuration loading and validation for different environments.
"""

from unidir.config.settings import (
    AuthSettings,
    Environment,
    LoggingSettings,
    RuntimeSettings,
    Settings,
    StorageSettings,
    get_settings,
    load_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "RuntimeSettings",
    "AuthSettings",
    "StorageSettings",
    "LoggingSettings",
    "get_settings",
    "load_settings",
]
