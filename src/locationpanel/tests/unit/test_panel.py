"""
Unit tests for LocationSettingsPanel: lifecycle, list sections and the
switch/mode round trip.
"""
from unittest.mock import MagicMock, patch

import pytest
from PyQt6.QtCore import QCoreApplication, QEvent, QObject, pyqtSignal

from locationpanel.constants.i18n import I18nStrings
from locationpanel.core.entries import DisplayEntry, EntrySource
from locationpanel.core.injector import InjectedServiceRegistry, StaticInjectedSource
from locationpanel.core.panel import LocationSettingsPanel
from locationpanel.core.subscription import ChangeChannel, ChangeSubscription


class FakeAuthority(QObject):
    mode_changed = pyqtSignal(int, bool)

    def __init__(self, mode=3, restricted=False):
        super().__init__()
        self.mode = mode
        self.restricted = restricted
        self.requests = []
        self.started = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def refresh(self):
        if self.started:
            self.mode_changed.emit(self.mode, self.restricted)

    def set_mode(self, mode):
        self.requests.append(mode)
        if not self.restricted:
            self.mode = mode
        self.refresh()


SERVICES = [
    {"title": "Wi-Fi scanning", "key": "wifi", "status": "Off"},
    {"title": "Bluetooth scanning", "key": "bt", "status": "On"},
]


@pytest.fixture
def i18n():
    return I18nStrings("en_US")


@pytest.fixture
def panels():
    created = []
    yield created
    for panel in created:
        if panel.reconciler is not None and panel.reconciler.listening:
            panel.on_pause()


@pytest.fixture
def make_panel(q_app, i18n, panels):
    def _make(authority=None, recent=(), services=(), hide_headers=False, channel=None):
        recent_source = MagicMock()
        recent_source.list.return_value = list(recent)
        panel = LocationSettingsPanel(
            authority=authority or FakeAuthority(),
            recent_source=recent_source,
            injected_sources=lambda: [StaticInjectedSource("cfg", services)] if services else [],
            settings_changed_channel=channel or ChangeChannel("test"),
            i18n=i18n,
            hide_headers=hide_headers,
        )
        panel.on_create()
        panels.append(panel)
        return panel
    return _make


def record(signal):
    values = []
    signal.connect(values.append)
    return values


def test_empty_recent_list_shows_placeholder(make_panel, i18n):
    panel = make_panel()
    panel.on_resume()

    assert len(panel.recent_entries) == 1
    placeholder = panel.recent_entries[0]
    assert placeholder.title == i18n.LOCATION_NO_RECENT_APPS
    assert placeholder.selectable is False
    assert placeholder.source is EntrySource.PLACEHOLDER


def test_empty_services_section_is_hidden(make_panel):
    panel = make_panel()
    visible = record(panel.services_section_visible)
    services = record(panel.service_entries_changed)
    panel.on_resume()

    assert visible == [False]
    assert services == [[]]
    assert panel.service_entries == []


def test_lists_are_sorted(make_panel):
    panel = make_panel(recent=[DisplayEntry("Maps"), DisplayEntry("Camera")], services=SERVICES)
    visible = record(panel.services_section_visible)
    panel.on_resume()

    assert [e.title for e in panel.recent_entries] == ["Camera", "Maps"]
    assert [e.title for e in panel.service_entries] == ["Bluetooth scanning", "Wi-Fi scanning"]
    assert visible == [True]


def test_failing_recent_source_falls_back_to_placeholder(make_panel):
    panel = make_panel()
    panel._recent_source.list.side_effect = OSError("gone")
    panel.on_resume()
    assert panel.recent_entries[0].source is EntrySource.PLACEHOLDER


def test_resume_reconciles_with_current_mode(make_panel, qtbot):
    panel = make_panel(authority=FakeAuthority(mode=2))
    checked = record(panel.switch_checked_changed)
    summaries = record(panel.mode_summary_changed)
    panel.on_resume()

    qtbot.waitUntil(lambda: panel.ui_state is not None)
    assert panel.ui_state.switch_checked is True
    assert panel.ui_state.mode_control_enabled is True
    assert checked == [True]
    assert summaries == ["Battery saving"]


def test_switch_echo_is_not_a_user_toggle(make_panel, qtbot):
    authority = FakeAuthority(mode=3)
    panel = make_panel(authority=authority)
    # A platform switch re-emits its toggle when written.
    panel.switch_checked_changed.connect(panel.on_switch_toggled)
    panel.on_resume()
    qtbot.waitUntil(lambda: panel.ui_state is not None)

    panel.on_switch_toggled(False)
    qtbot.waitUntil(lambda: panel.ui_state.switch_checked is False)
    qtbot.wait(50)

    assert authority.requests == [0]
    assert authority.mode == 0


def test_restricted_toggle_snaps_back(make_panel, qtbot):
    authority = FakeAuthority(mode=3, restricted=True)
    panel = make_panel(authority=authority)
    checked = record(panel.switch_checked_changed)
    panel.on_resume()
    qtbot.waitUntil(lambda: panel.ui_state is not None)
    assert panel.ui_state.switch_enabled is False

    panel.on_switch_toggled(False)
    qtbot.wait(50)

    assert authority.requests == [0]
    assert authority.mode == 3
    assert panel.ui_state.switch_checked is True
    assert checked == [True, True]


def test_pause_stops_everything(make_panel, qtbot):
    authority = FakeAuthority()
    channel = ChangeChannel("test")
    panel = make_panel(authority=authority, services=SERVICES, channel=channel)
    panel.on_resume()
    qtbot.wait(50)
    registry = panel.registry

    panel.on_pause()
    assert registry.closed
    assert panel.registry is None

    state_before = panel.ui_state
    authority.mode_changed.emit(0, False)
    channel.notify()
    qtbot.wait(50)

    assert not authority.started
    assert not panel.reconciler.listening
    assert panel.ui_state == state_before
    assert channel.receivers(channel.changed) == 0


def test_pause_twice_is_harmless(make_panel):
    panel = make_panel()
    panel.on_resume()
    panel.on_pause()
    panel.on_pause()


def test_resume_after_pause_rebuilds_lists(make_panel, qtbot):
    panel = make_panel(services=SERVICES)
    panel.on_resume()
    first_registry = panel.registry
    panel.on_pause()

    changes = record(panel.recent_entries_changed)
    panel.on_resume()

    assert panel.registry is not first_registry
    assert not panel.registry.closed
    assert len(changes) == 1
    qtbot.waitUntil(lambda: panel.ui_state is not None)


def test_resume_pause_cycles_release_old_registries(make_panel, qtbot):
    channel = ChangeChannel("test")
    panel = make_panel(services=SERVICES, channel=channel)
    for _ in range(20):
        panel.on_resume()
        qtbot.wait(5)
        panel.on_pause()
    panel.on_resume()
    qtbot.wait(20)
    QCoreApplication.sendPostedEvents(None, QEvent.Type.DeferredDelete)

    assert len(panel.findChildren(InjectedServiceRegistry)) == 1
    assert len(panel.findChildren(ChangeSubscription)) == 1
    assert channel.receivers(channel.changed) == 1


def test_settings_change_refreshes_injected_services(make_panel, qtbot):
    channel = ChangeChannel("test")
    panel = make_panel(services=SERVICES, channel=channel)
    panel.on_resume()
    qtbot.wait(50)

    with patch.object(panel.registry, "refresh") as mock_refresh:
        channel.notify()
        mock_refresh.assert_called_once()


def test_mode_change_refreshes_injected_services(make_panel, qtbot):
    panel = make_panel(services=SERVICES)
    panel.on_resume()
    with patch.object(panel.registry, "refresh") as mock_refresh:
        qtbot.waitUntil(lambda: mock_refresh.called)


def test_master_switch_visibility(make_panel):
    panel = make_panel()
    visible = record(panel.master_switch_visible)
    panel.on_start()
    panel.on_stop()
    assert visible == [True, False]


def test_hidden_headers_keep_master_switch_hidden(make_panel):
    panel = make_panel(hide_headers=True)
    visible = record(panel.master_switch_visible)
    panel.on_start()
    panel.on_stop()
    assert visible == []


def test_mode_screen_only_when_mode_control_enabled(make_panel, qtbot):
    authority = FakeAuthority(mode=0)
    panel = make_panel(authority=authority)
    requested = []
    panel.mode_screen_requested.connect(lambda: requested.append(True))
    panel.on_resume()
    qtbot.waitUntil(lambda: panel.ui_state is not None)

    panel.open_mode_screen()
    assert requested == []

    authority.mode = 3
    authority.refresh()
    qtbot.waitUntil(lambda: panel.ui_state.mode_control_enabled)
    panel.open_mode_screen()
    assert requested == [True]


def test_activate_entry_ignores_placeholder(make_panel):
    panel = make_panel()
    activated = record(panel.entry_activated)
    panel.on_resume()

    panel.activate_entry(panel.recent_entries[0])
    entry = DisplayEntry("Maps")
    panel.activate_entry(entry)

    assert activated == [entry]


def test_help_url(make_panel):
    assert make_panel().help_url.startswith("https://")
