"""
Location mode model and the derived UI state of the panel.

The derivation in `compute_ui_state` is pure: it maps a raw mode value and the
restriction flag to the enabled/checked state of every control, and is the single
place those rules live.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union

from locationpanel import constants


class LocationMode(enum.IntEnum):
    """The quantized location setting."""
    OFF = constants.location.mode.OFF
    SENSORS_ONLY = constants.location.mode.SENSORS_ONLY
    BATTERY_SAVING = constants.location.mode.BATTERY_SAVING
    HIGH_ACCURACY = constants.location.mode.HIGH_ACCURACY

    @classmethod
    def from_value(cls, value: Union[int, "LocationMode"]) -> Optional["LocationMode"]:
        """Returns the matching mode, or None for a value outside the known modes."""
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def summary_key(self) -> str:
        """i18n key of the text shown under the mode entry."""
        return constants.location.mode.SUMMARY_KEYS[int(self)]


@dataclass(frozen=True)
class UiState:
    """Enabled/checked state of the panel's controls for one (mode, restricted) pair."""
    switch_checked: bool
    switch_enabled: bool
    mode_control_enabled: bool
    recent_list_enabled: bool
    mode_summary_key: Optional[LocationMode]


def compute_ui_state(mode: Union[int, LocationMode], restricted: bool) -> UiState:
    """
    Derives the control state for a mode value.

    A restricted user can't change the mode, so the switch is disabled. The mode
    may still be on (set by policy); in that case the switch is disabled but checked.
    Unknown mode values count as "not off" and carry no summary key.
    """
    enabled = int(mode) != LocationMode.OFF
    return UiState(
        switch_checked=enabled,
        switch_enabled=not restricted,
        mode_control_enabled=enabled and not restricted,
        recent_list_enabled=enabled,
        mode_summary_key=LocationMode.from_value(mode),
    )
