"""
Settings-backed location mode authority.

Stores the location mode in the application's configuration file and announces
changes with `mode_changed(mode, restricted)`. Edits to the file made by another
process are picked up through a QFileSystemWatcher. The panel only depends on the
authority's contract (`get_current_mode`, `set_mode`, `is_restricted`,
`mode_changed`); this class is the implementation used by the application.
"""

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import QFileSystemWatcher, QObject, pyqtSignal

from locationpanel.core.mode import LocationMode
from locationpanel.utils.config import ConfigError, ConfigManager

logger = logging.getLogger("LocationPanel.ModeAuthority")


class SettingsModeAuthority(QObject):
    """
    Reads and writes the location mode through a ConfigManager.

    Announcements are only made while active (between `start()` and `stop()`).

    Signals:
        mode_changed (int, bool): The current mode and the restriction flag.
        config_file_changed: The configuration file was rewritten, by us or another process.
    """
    mode_changed = pyqtSignal(int, bool)
    config_file_changed = pyqtSignal()

    def __init__(self, config_manager: ConfigManager, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logger
        self._config_manager = config_manager
        self._config: Dict[str, Any] = config_manager.load()
        self._active = False
        self._watcher: Optional[QFileSystemWatcher] = None

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Starts announcing changes and watching the configuration file."""
        if self._active:
            return
        self._active = True
        self._watcher = QFileSystemWatcher(self)
        self._watch_config_file()
        self._watcher.fileChanged.connect(self._on_file_changed)
        self.logger.debug("Mode authority started.")

    def stop(self) -> None:
        """Stops announcing changes."""
        if not self._active:
            return
        self._active = False
        if self._watcher is not None:
            self._watcher.fileChanged.disconnect(self._on_file_changed)
            self._watcher.deleteLater()
            self._watcher = None
        self.logger.debug("Mode authority stopped.")

    def get_current_mode(self) -> int:
        return int(self._config["location_mode"])

    def is_restricted(self) -> bool:
        return bool(self._config["restricted"])

    def set_mode(self, mode: int) -> None:
        """
        Requests a new mode. A restricted user can't change the mode; the current
        mode is re-announced instead so the display snaps back.
        """
        if self.is_restricted():
            self.logger.info("Restricted user, not setting location mode.")
            if self._active:
                self.mode_changed.emit(self.get_current_mode(), True)
            return

        if LocationMode.from_value(mode) is None:
            self.logger.warning("Refusing to set unknown location mode %r.", mode)
            return

        previous = self._config["location_mode"]
        self._config["location_mode"] = int(mode)
        try:
            self._config_manager.save(self._config)
        except ConfigError as e:
            self.logger.error("Failed to persist location mode %s: %s", mode, e)
            self._config["location_mode"] = previous
        self.refresh()

    def refresh(self) -> None:
        """Announces the current state."""
        if self._active:
            self.mode_changed.emit(self.get_current_mode(), self.is_restricted())

    def _watch_config_file(self) -> None:
        path = str(self._config_manager.config_path)
        if self._watcher is not None and path not in self._watcher.files() and self._config_manager.config_path.exists():
            self._watcher.addPath(path)

    def _on_file_changed(self, path: str) -> None:
        # Atomic replaces drop the watch; re-add it.
        self._watch_config_file()
        try:
            config = self._config_manager.load()
        except ConfigError as e:
            self.logger.error("Failed to reload configuration after external change: %s", e)
            return
        changed = (config["location_mode"] != self._config["location_mode"]
                   or config["restricted"] != self._config["restricted"])
        self._config = config
        self.config_file_changed.emit()
        if changed:
            self.logger.info("Location settings changed externally (mode=%s, restricted=%s).",
                             config["location_mode"], config["restricted"])
            self.refresh()
