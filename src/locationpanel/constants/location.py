"""
Constants describing the location capability: raw mode values, recent-request
windows, and the i18n keys used to render mode summaries.
"""
from typing import Dict, Final


class ModeValueConstants:
    """Raw integer values of the location mode as stored by the settings authority."""
    OFF: Final[int] = 0
    SENSORS_ONLY: Final[int] = 1
    BATTERY_SAVING: Final[int] = 2
    HIGH_ACCURACY: Final[int] = 3

    # Mode requested when the user turns the master switch on.
    SWITCH_ON_MODE: Final[int] = HIGH_ACCURACY

    # i18n keys for the summary shown under the mode entry, by raw value.
    SUMMARY_KEYS: Final[Dict[int, str]] = {
        OFF: "LOCATION_MODE_OFF_TITLE",
        SENSORS_ONLY: "LOCATION_MODE_SENSORS_ONLY_TITLE",
        BATTERY_SAVING: "LOCATION_MODE_BATTERY_SAVING_TITLE",
        HIGH_ACCURACY: "LOCATION_MODE_HIGH_ACCURACY_TITLE",
    }

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        values = [self.OFF, self.SENSORS_ONLY, self.BATTERY_SAVING, self.HIGH_ACCURACY]
        if len(set(values)) != len(values):
            raise ValueError("Location mode values must be distinct")
        if set(self.SUMMARY_KEYS.keys()) != set(values):
            raise ValueError("SUMMARY_KEYS must cover every location mode")
        if self.SWITCH_ON_MODE == self.OFF:
            raise ValueError("SWITCH_ON_MODE must not be OFF")


class RecentRequestConstants:
    """Constants for the recent location requests list."""
    # Requests older than this are not shown.
    RECENT_WINDOW_SECONDS: Final[int] = 15 * 60
    HIGH_POWER_SUMMARY_KEY: Final[str] = "LOCATION_HIGH_BATTERY_USE"
    LOW_POWER_SUMMARY_KEY: Final[str] = "LOCATION_LOW_BATTERY_USE"
    PLACEHOLDER_TITLE_KEY: Final[str] = "LOCATION_NO_RECENT_APPS"
    LOG_FILENAME: Final[str] = "location_requests.json"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.RECENT_WINDOW_SECONDS <= 0:
            raise ValueError("RECENT_WINDOW_SECONDS must be positive")


class LocationConstants:
    """Container for location panel constants."""
    HELP_URL: Final[str] = "https://support.google.com/android/answer/3467281"

    def __init__(self) -> None:
        self.mode = ModeValueConstants()
        self.recent = RecentRequestConstants()


# Singleton instance for easy access
location = LocationConstants()
