"""
Mode state reconciliation for the location panel.

The ModeStateReconciler keeps the master switch, the mode value and the
restriction flag consistent. Mode changes come in through `on_mode_changed`;
user flips of the switch come in through `on_switch_toggled` and leave as a
single mode request. Writing the derived checked state back to the switch must
never be mistaken for a user flip, so the write happens under a
programmatic-update guard that the toggle handler honours.
"""

import logging
from typing import Callable, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from locationpanel import constants
from locationpanel.core.mode import LocationMode, UiState, compute_ui_state

logger = logging.getLogger("LocationPanel.ModeStateReconciler")


class ModeStateReconciler(QObject):
    """
    Derives control state from (mode, restricted) pushes and turns user toggles
    into mode requests.

    Lives on the UI thread. Pushes from other threads must arrive through a Qt
    queued connection (connect the authority's signal to `on_mode_changed`).

    Signals:
        ui_state_changed (UiState): Emitted after every reconciliation pass.
        switch_checked_changed (bool): A programmatic write of the switch's checked state.
        injected_refresh_requested: Emitted on every mode change, so injected
            service summaries are revalidated even when their app stays silent.
    """
    ui_state_changed = pyqtSignal(object)
    switch_checked_changed = pyqtSignal(bool)
    injected_refresh_requested = pyqtSignal()

    def __init__(self, request_mode: Optional[Callable[[int], None]] = None,
                 parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logger
        self._request_mode = request_mode
        self._switch_checked = False
        self._listening = False
        self._programmatic_update = False
        self._state: Optional[UiState] = None

    @property
    def state(self) -> Optional[UiState]:
        """The state computed by the last reconciliation pass, if any."""
        return self._state

    @property
    def switch_checked(self) -> bool:
        """The checked value the switch currently displays."""
        return self._switch_checked

    @property
    def listening(self) -> bool:
        return self._listening

    def set_listening(self, listening: bool) -> None:
        """Arms or disarms the switch listener. Disarmed while the panel is paused."""
        self._listening = listening

    @pyqtSlot(int, bool)
    def on_mode_changed(self, mode: Union[int, LocationMode], restricted: bool) -> UiState:
        """Reconciles the controls with a new (mode, restricted) pair."""
        state = compute_ui_state(mode, restricted)
        if state.mode_summary_key is None:
            self.logger.debug("Unknown location mode %r; leaving the summary unset.", mode)

        if state.switch_checked != self._switch_checked:
            self._write_switch(state.switch_checked)

        self._state = state
        self.ui_state_changed.emit(state)

        # Safety net: some apps don't announce their own setting changes.
        self.injected_refresh_requested.emit()
        return state

    def _write_switch(self, checked: bool) -> None:
        if self._listening:
            self._programmatic_update = True
        try:
            self._switch_checked = checked
            self.switch_checked_changed.emit(checked)
        finally:
            self._programmatic_update = False

    @pyqtSlot(bool)
    def on_switch_toggled(self, checked: bool) -> None:
        """Slot for the switch's toggle notifications."""
        if self._programmatic_update:
            return
        self._switch_checked = checked
        if not self._listening:
            self.logger.debug("Switch toggled while not listening; ignoring.")
            return
        self.on_user_toggled(checked)

    def on_user_toggled(self, checked: bool) -> None:
        """
        Turns a user flip into one mode request. Local state is left alone; the
        outcome comes back through `on_mode_changed`.
        """
        mode = LocationMode(constants.location.mode.SWITCH_ON_MODE) if checked else LocationMode.OFF
        self.logger.info("User turned location %s; requesting mode %s.", "on" if checked else "off", mode.name)
        if self._request_mode is not None:
            self._request_mode(int(mode))
