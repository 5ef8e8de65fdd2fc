"""
Unit tests for ModeStateReconciler: state derivation, user toggles and the
programmatic-update guard.
"""
import pytest

from locationpanel.core.mode import LocationMode
from locationpanel.core.reconciler import ModeStateReconciler


@pytest.fixture
def requests():
    return []


@pytest.fixture
def reconciler(q_app, requests):
    r = ModeStateReconciler(request_mode=requests.append)
    # Behave like a platform switch: every write of the checked state re-emits a toggle.
    r.switch_checked_changed.connect(r.on_switch_toggled)
    return r


def test_mode_change_updates_state_and_switch(reconciler):
    written = []
    reconciler.switch_checked_changed.connect(written.append)

    state = reconciler.on_mode_changed(LocationMode.BATTERY_SAVING, False)

    assert state.switch_checked is True
    assert state.mode_summary_key is LocationMode.BATTERY_SAVING
    assert reconciler.state == state
    assert reconciler.switch_checked is True
    assert written == [True]


def test_switch_is_not_rewritten_when_unchanged(reconciler):
    written = []
    reconciler.on_mode_changed(3, False)
    reconciler.switch_checked_changed.connect(written.append)
    reconciler.on_mode_changed(1, False)
    assert written == []


def test_programmatic_write_does_not_request_a_mode(reconciler, requests):
    reconciler.set_listening(True)
    for mode in [3, 0, 1, 0, 2, 0, 3]:
        reconciler.on_mode_changed(mode, False)
    assert requests == []


def test_user_toggle_requests_high_accuracy_or_off(reconciler, requests):
    reconciler.set_listening(True)

    reconciler.on_switch_toggled(True)
    reconciler.on_switch_toggled(False)

    assert requests == [int(LocationMode.HIGH_ACCURACY), int(LocationMode.OFF)]


def test_user_toggle_leaves_state_to_the_authority(reconciler):
    reconciler.set_listening(True)
    before = reconciler.on_mode_changed(0, False)
    reconciler.on_switch_toggled(True)
    assert reconciler.state == before


def test_toggle_while_not_listening_is_ignored(reconciler, requests):
    reconciler.on_switch_toggled(True)
    assert requests == []
    assert reconciler.switch_checked is True


def test_write_while_not_listening_does_not_request(reconciler, requests):
    reconciler.on_mode_changed(3, False)
    reconciler.set_listening(True)
    reconciler.on_mode_changed(0, False)
    assert requests == []


def test_guard_is_cleared_after_a_write(reconciler, requests):
    reconciler.set_listening(True)
    reconciler.on_mode_changed(3, False)
    reconciler.on_switch_toggled(False)
    assert requests == [0]


def test_injected_refresh_requested_on_every_mode_change(reconciler):
    refreshes = []
    reconciler.injected_refresh_requested.connect(lambda: refreshes.append(True))
    reconciler.on_mode_changed(3, False)
    reconciler.on_mode_changed(3, False)
    reconciler.on_mode_changed(0, True)
    assert len(refreshes) == 3


def test_restricted_state_is_checked_and_disabled(reconciler):
    state = reconciler.on_mode_changed(3, True)
    assert state.switch_checked is True
    assert state.switch_enabled is False
    assert state.mode_control_enabled is False


def test_unknown_mode_is_treated_as_on(reconciler):
    state = reconciler.on_mode_changed(99, False)
    assert state.switch_checked is True
    assert state.mode_summary_key is None


def test_no_request_callable(q_app):
    reconciler = ModeStateReconciler()
    reconciler.set_listening(True)
    reconciler.on_switch_toggled(True)
    assert reconciler.switch_checked is True
