"""
Unit tests for the location mode model and the derived UI state.
"""
import pytest

from locationpanel.core.mode import LocationMode, UiState, compute_ui_state


@pytest.mark.parametrize("restricted", [False, True])
@pytest.mark.parametrize("mode", [LocationMode.SENSORS_ONLY, LocationMode.BATTERY_SAVING, LocationMode.HIGH_ACCURACY])
def test_any_mode_but_off_is_checked(mode, restricted):
    state = compute_ui_state(mode, restricted=restricted)
    assert state == UiState(
        switch_checked=True,
        switch_enabled=not restricted,
        mode_control_enabled=not restricted,
        recent_list_enabled=True,
        mode_summary_key=mode,
    )


@pytest.mark.parametrize("restricted", [False, True])
def test_off_state(restricted):
    assert compute_ui_state(0, restricted=restricted) == UiState(
        switch_checked=False,
        switch_enabled=not restricted,
        mode_control_enabled=False,
        recent_list_enabled=False,
        mode_summary_key=LocationMode.OFF,
    )


def test_unknown_mode_counts_as_on_without_summary():
    state = compute_ui_state(42, restricted=False)
    assert state.switch_checked is True
    assert state.mode_control_enabled is True
    assert state.mode_summary_key is None


def test_raw_ints_are_accepted():
    assert compute_ui_state(2, False) == compute_ui_state(LocationMode.BATTERY_SAVING, False)


def test_from_value_and_summary_key():
    assert LocationMode.from_value(1) is LocationMode.SENSORS_ONLY
    assert LocationMode.from_value(-1) is None
    assert LocationMode.HIGH_ACCURACY.summary_key == "LOCATION_MODE_HIGH_ACCURACY_TITLE"
