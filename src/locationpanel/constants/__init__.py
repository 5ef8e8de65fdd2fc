"""
Provides centralized, immutable constants for the LocationPanel application.

This package exposes singleton instances of constant groups, ensuring they
are validated on import and easily accessible from a single namespace.

Usage:
    from locationpanel import constants

    # Access application metadata
    print(constants.app.VERSION)

    # Access a translated string
    print(constants.i18n.get_i18n().LOCATION_SETTINGS_TITLE)

    # Access a raw location mode value
    if mode == constants.location.mode.OFF:
        # ...
"""

from .app import app
from .config import config
from .location import location
from .logs import logs
from .timeouts import timeouts
from . import i18n

__all__ = [
    "app",
    "config",
    "i18n",
    "location",
    "logs",
    "timeouts",
]
