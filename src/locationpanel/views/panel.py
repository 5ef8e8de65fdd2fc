"""
Location Settings View.

Displays the state published by a LocationSettingsPanel and forwards user
input back to it. Holds no logic of its own beyond widget bookkeeping.
"""
from typing import Iterable, Optional

from PyQt6.QtCore import Qt, QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import (
    QGroupBox, QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QPushButton, QVBoxLayout, QWidget
)

from locationpanel.core.entries import DisplayEntry
from locationpanel.core.mode import UiState
from locationpanel.core.panel import LocationSettingsPanel
from locationpanel.utils.components import MasterSwitch


ENTRY_ROLE = Qt.ItemDataRole.UserRole


class LocationSettingsView(QWidget):
    def __init__(self, panel: LocationSettingsPanel, i18n, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.panel = panel
        self.i18n = i18n
        self.setWindowTitle(i18n.LOCATION_SETTINGS_TITLE)
        self._setup_ui()
        self._connect_panel()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        header.addWidget(QLabel(self.i18n.LOCATION_SETTINGS_TITLE))
        header.addStretch()
        self.master_switch = MasterSwitch(parent=self)
        self.master_switch.setToolTip(self.i18n.LOCATION_SWITCH_TOOLTIP)
        self.master_switch.setVisible(False)
        header.addWidget(self.master_switch)
        layout.addLayout(header)

        self.mode_button = QPushButton(self.i18n.LOCATION_MODE_TITLE)
        self.mode_button.setEnabled(False)
        self.mode_summary_label = QLabel("")
        mode_row = QVBoxLayout()
        mode_row.setSpacing(0)
        mode_row.addWidget(self.mode_button)
        mode_row.addWidget(self.mode_summary_label)
        layout.addLayout(mode_row)

        self.recent_group = QGroupBox(self.i18n.LOCATION_CATEGORY_RECENT_REQUESTS)
        self.recent_list = QListWidget()
        QVBoxLayout(self.recent_group).addWidget(self.recent_list)
        layout.addWidget(self.recent_group)

        self.services_group = QGroupBox(self.i18n.LOCATION_CATEGORY_SERVICES)
        self.services_list = QListWidget()
        QVBoxLayout(self.services_group).addWidget(self.services_list)
        self.services_group.setVisible(False)
        layout.addWidget(self.services_group)

        layout.addStretch()
        self.help_button = QPushButton(self.i18n.HELP_LABEL)
        layout.addWidget(self.help_button, alignment=Qt.AlignmentFlag.AlignRight)

    def _connect_panel(self):
        self.master_switch.toggled.connect(self.panel.on_switch_toggled)
        self.mode_button.clicked.connect(self.panel.open_mode_screen)
        self.help_button.clicked.connect(self.open_help)
        self.recent_list.itemActivated.connect(self._on_item_activated)
        self.services_list.itemActivated.connect(self._on_item_activated)

        self.panel.master_switch_visible.connect(self.master_switch.setVisible)
        # setChecked re-emits toggled; the reconciler recognises its own write.
        self.panel.switch_checked_changed.connect(self.master_switch.setChecked)
        self.panel.ui_state_changed.connect(self.apply_ui_state)
        self.panel.mode_summary_changed.connect(self.mode_summary_label.setText)
        self.panel.recent_entries_changed.connect(lambda entries: self._populate(self.recent_list, entries))
        self.panel.service_entries_changed.connect(lambda entries: self._populate(self.services_list, entries))
        self.panel.services_section_visible.connect(self.services_group.setVisible)

    def apply_ui_state(self, state: UiState) -> None:
        self.master_switch.setEnabled(state.switch_enabled)
        self.master_switch.setToolTip(
            self.i18n.LOCATION_SWITCH_TOOLTIP if state.switch_enabled else self.i18n.LOCATION_RESTRICTED_TOOLTIP)
        self.mode_button.setEnabled(state.mode_control_enabled)
        self.recent_group.setEnabled(state.recent_list_enabled)

    def open_help(self) -> None:
        QDesktopServices.openUrl(QUrl(self.panel.help_url))

    def _populate(self, list_widget: QListWidget, entries: Iterable[DisplayEntry]) -> None:
        list_widget.clear()
        for entry in entries:
            text = entry.title if not entry.summary else f"{entry.title}\n{entry.summary}"
            item = QListWidgetItem(text)
            item.setData(ENTRY_ROLE, entry)
            flags = item.flags()
            if not entry.enabled:
                flags &= ~Qt.ItemFlag.ItemIsEnabled
            if not entry.selectable:
                flags &= ~Qt.ItemFlag.ItemIsSelectable
            item.setFlags(flags)
            list_widget.addItem(item)

    def _on_item_activated(self, item: QListWidgetItem) -> None:
        entry = item.data(ENTRY_ROLE)
        if isinstance(entry, DisplayEntry):
            self.panel.activate_entry(entry)
