"""
Configuration package for the AccessMenu ordering core.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    OrderSettings,
    MatcherSettings,
    CatalogSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "OrderSettings",
    "MatcherSettings",
    "CatalogSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
