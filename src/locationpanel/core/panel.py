"""
Location settings panel orchestration.

The LocationSettingsPanel owns the panel's lifecycle and wires the reconciler,
the recent apps source, the injected services registry and the change
subscription together. It talks to the display only through its signals and
its public slots, so any view (or a test) can drive it.

Lifecycle, mirroring a hosted settings screen:
    on_create -> on_start -> on_resume <-> on_pause -> on_stop
"""

import logging
from typing import Callable, Iterable, List, Optional

from PyQt6.QtCore import QObject, Qt, pyqtSignal

from locationpanel import constants
from locationpanel.core.entries import DisplayEntry, build_recent_list, build_services_list
from locationpanel.core.injector import InjectedServiceRegistry, InjectedServiceSource
from locationpanel.core.mode import UiState
from locationpanel.core.reconciler import ModeStateReconciler
from locationpanel.core.subscription import ChangeChannel, ChangeSubscription, open_subscription

logger = logging.getLogger("LocationPanel.Panel")


class LocationSettingsPanel(QObject):
    """
    Orchestrates the location settings panel.

    Signals:
        master_switch_visible (bool): Show or hide the master switch.
        switch_checked_changed (bool): Programmatic write of the switch's checked state.
        ui_state_changed (UiState): New enabled/checked state of the controls.
        mode_summary_changed (str): Text to show under the mode entry.
        recent_entries_changed (list): The recent location requests list.
        service_entries_changed (list): The injected location services list.
        services_section_visible (bool): Whether the services section is shown.
        mode_screen_requested: Navigate to the mode selector screen.
        entry_activated (DisplayEntry): Navigate to the details of an entry.
    """
    master_switch_visible = pyqtSignal(bool)
    switch_checked_changed = pyqtSignal(bool)
    ui_state_changed = pyqtSignal(object)
    mode_summary_changed = pyqtSignal(str)
    recent_entries_changed = pyqtSignal(object)
    service_entries_changed = pyqtSignal(object)
    services_section_visible = pyqtSignal(bool)
    mode_screen_requested = pyqtSignal()
    entry_activated = pyqtSignal(object)

    def __init__(self, authority, recent_source,
                 injected_sources: Callable[[], Iterable[InjectedServiceSource]],
                 settings_changed_channel: ChangeChannel, i18n,
                 hide_headers: bool = False, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logger
        self.i18n = i18n
        self._authority = authority
        self._recent_source = recent_source
        self._injected_sources = injected_sources
        self._channel = settings_changed_channel
        self._hide_headers = hide_headers

        self.reconciler: Optional[ModeStateReconciler] = None
        self._registry: Optional[InjectedServiceRegistry] = None
        self._subscription: Optional[ChangeSubscription] = None
        self._ui_state: Optional[UiState] = None
        self.recent_entries: List[DisplayEntry] = []
        self.service_entries: List[DisplayEntry] = []

    @property
    def help_url(self) -> str:
        return constants.location.HELP_URL

    @property
    def ui_state(self) -> Optional[UiState]:
        return self._ui_state

    @property
    def registry(self) -> Optional[InjectedServiceRegistry]:
        return self._registry

    # --- Lifecycle ---

    def on_create(self) -> None:
        """Builds the reconciler and wires it to the authority."""
        self.reconciler = ModeStateReconciler(request_mode=self._authority.set_mode, parent=self)
        self.reconciler.switch_checked_changed.connect(self.switch_checked_changed)
        self.reconciler.ui_state_changed.connect(self._on_ui_state_changed)
        self.reconciler.injected_refresh_requested.connect(self._refresh_injected)
        self.logger.debug("Panel created.")

    def on_start(self) -> None:
        # Only show the master switch when not hosted with hidden headers (setup wizard).
        if not self._hide_headers:
            self.master_switch_visible.emit(True)

    def on_stop(self) -> None:
        if not self._hide_headers:
            self.master_switch_visible.emit(False)

    def on_resume(self) -> None:
        """Arms the switch listener, rebuilds both lists and starts listening for changes."""
        self.reconciler.set_listening(True)
        self._create_hierarchy()
        # Queued: pushes are reconciled one at a time from the event loop, whatever thread they came from.
        self._authority.mode_changed.connect(self.reconciler.on_mode_changed, Qt.ConnectionType.QueuedConnection)
        self._authority.start()
        self._authority.refresh()
        self.logger.debug("Panel resumed.")

    def on_pause(self) -> None:
        """Stops listening for changes. Completions still in flight are discarded."""
        self._release_injected()
        try:
            self._authority.mode_changed.disconnect(self.reconciler.on_mode_changed)
        except (TypeError, RuntimeError):
            pass
        self._authority.stop()
        self.reconciler.set_listening(False)
        self.logger.debug("Panel paused.")

    # --- Hierarchy ---

    def _create_hierarchy(self) -> None:
        self._load_recent_apps()
        self._add_location_services()

    def _load_recent_apps(self) -> None:
        try:
            requests = self._recent_source.list()
        except Exception as e:
            self.logger.error("Failed to list recent location requests: %s", e, exc_info=True)
            requests = []
        placeholder = self.i18n.get(constants.location.recent.PLACEHOLDER_TITLE_KEY)
        self.recent_entries = build_recent_list(requests, placeholder)
        self.recent_entries_changed.emit(list(self.recent_entries))

    def _add_location_services(self) -> None:
        """
        Loads the injected services and hides their section when there are none.
        Reloads their status whenever the settings-changed channel fires.
        """
        self._release_injected()
        self._registry = InjectedServiceRegistry(self._injected_sources(), parent=self)
        self._registry.entries_changed.connect(self._on_services_changed)
        services = self._registry.load()
        self._subscription = open_subscription(self._channel, self._on_injected_setting_changed, parent=self)

        self._publish_services(services)

    def _release_injected(self) -> None:
        """Closes and releases the subscription and the registry of the last resume."""
        if self._subscription is not None:
            self._subscription.close()
            self._subscription.deleteLater()
            self._subscription = None
        if self._registry is not None:
            self._registry.close()
            try:
                self._registry.entries_changed.disconnect(self._on_services_changed)
            except (TypeError, RuntimeError):
                pass
            self._registry.deleteLater()
            self._registry = None

    def _publish_services(self, services: Iterable[DisplayEntry]) -> None:
        self.service_entries = build_services_list(services)
        self.services_section_visible.emit(bool(self.service_entries))
        self.service_entries_changed.emit(list(self.service_entries))

    # --- Event handlers ---

    def _on_injected_setting_changed(self) -> None:
        self.logger.debug("Received injected setting change on '%s'.", self._channel.name)
        self._refresh_injected()

    def _refresh_injected(self) -> None:
        if self._registry is not None:
            self._registry.refresh()

    def _on_services_changed(self, entries: List[DisplayEntry]) -> None:
        self._publish_services(entries)

    def _on_ui_state_changed(self, state: UiState) -> None:
        self._ui_state = state
        self.ui_state_changed.emit(state)
        if state.mode_summary_key is not None:
            self.mode_summary_changed.emit(self.i18n.get(state.mode_summary_key.summary_key))

    # --- Display callbacks ---

    def on_switch_toggled(self, checked: bool) -> None:
        """Slot for the master switch's toggle notifications."""
        self.reconciler.on_switch_toggled(checked)

    def open_mode_screen(self) -> None:
        """Slot for a click on the mode entry."""
        if self._ui_state is not None and self._ui_state.mode_control_enabled:
            self.mode_screen_requested.emit()

    def activate_entry(self, entry: DisplayEntry) -> None:
        """Slot for a click on a list entry. Placeholders do nothing."""
        if entry.selectable:
            self.entry_activated.emit(entry)
