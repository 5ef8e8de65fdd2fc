"""
Constants for application configuration defaults and constraints.
"""
from typing import Final, Dict, Any

from .location import location

class ConfigMessages:
    """Log message templates for configuration validation."""
    INVALID_BOOLEAN: Final[str] = "Invalid {key} '{value}', resetting to boolean default '{default}'"
    INVALID_CHOICE: Final[str] = "Invalid {key} '{value}', resetting to default '{default}'. Valid choices: {choices}"
    INVALID_PATH: Final[str] = "Invalid {key} '{value}', resetting to None"
    INVALID_SERVICE: Final[str] = "Dropping malformed injected service entry: {value}"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for attr_name in dir(self):
            if not attr_name.startswith('_') and attr_name.isupper():
                value = getattr(self, attr_name)
                if not isinstance(value, str) or not value:
                    raise ValueError(f"ConfigMessages.{attr_name} must be a non-empty string.")


class ConfigConstants:
    """Defines default values and constraints for all application settings."""
    DEFAULT_LOCATION_MODE: Final[int] = location.mode.HIGH_ACCURACY
    DEFAULT_RESTRICTED: Final[bool] = False
    DEFAULT_HIDE_HEADERS: Final[bool] = False

    CONFIG_FILENAME: Final[str] = "LocationPanel_Config.json"

    DEFAULT_CONFIG: Final[Dict[str, Any]] = {
        "language": None,
        "location_mode": DEFAULT_LOCATION_MODE,
        "restricted": DEFAULT_RESTRICTED,
        "hide_headers": DEFAULT_HIDE_HEADERS,
        "recent_apps_log": None,
        "injected_services": [],
    }

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.DEFAULT_LOCATION_MODE not in location.mode.SUMMARY_KEYS:
            raise ValueError("DEFAULT_LOCATION_MODE must be a known location mode")
        if not self.CONFIG_FILENAME:
            raise ValueError("CONFIG_FILENAME must not be empty")
        for key in ("location_mode", "restricted", "hide_headers"):
            if key not in self.DEFAULT_CONFIG:
                raise ValueError(f"DEFAULT_CONFIG is missing '{key}'")


class ConfigurationConstants:
    """Container for configuration constants."""
    def __init__(self) -> None:
        self.defaults = ConfigConstants()
        self.messages = ConfigMessages()

# Singleton instance for easy access
config = ConfigurationConstants()
