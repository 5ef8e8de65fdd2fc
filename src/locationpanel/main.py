"""
Application entry point and lifecycle management for LocationPanel.
"""

import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication, QMessageBox

from locationpanel import constants
from locationpanel.core.authority import SettingsModeAuthority
from locationpanel.core.entries import DisplayEntry
from locationpanel.core.injector import InjectedServiceSource, StaticInjectedSource
from locationpanel.core.panel import LocationSettingsPanel
from locationpanel.core.recent_apps import RecentLocationApps
from locationpanel.core.subscription import ChangeChannel
from locationpanel.utils.config import ConfigManager
from locationpanel.utils.helpers import get_app_data_path, setup_logging
from locationpanel.views.panel import LocationSettingsView

INJECTED_SETTINGS_CHANNEL = "injected_settings_changed"
CONFIG_SOURCE_NAME = "config"


def build_injected_sources(config_manager: ConfigManager) -> List[InjectedServiceSource]:
    """
    Builds the injected service sources declared in the configuration file.

    Status text is re-read from the file on every refresh, through a separate
    ConfigManager since queries run on the status worker thread.
    """
    config = config_manager.load()
    status_reader = ConfigManager(config_manager.config_path)

    def read_status(entry: DisplayEntry) -> Optional[str]:
        current = StaticInjectedSource(CONFIG_SOURCE_NAME, status_reader.load()["injected_services"])
        return current.query_status(entry)

    return [StaticInjectedSource(CONFIG_SOURCE_NAME, config["injected_services"], status_provider=read_status)]


def resolve_recent_apps_log(config) -> Path:
    configured = config.get("recent_apps_log")
    if configured:
        return Path(configured)
    return get_app_data_path() / constants.location.recent.LOG_FILENAME


def main() -> int:
    """
    Main entry point for the LocationPanel application.

    Orchestrates the application's startup sequence:
    1. Sets up logging.
    2. Loads configuration.
    3. Initializes internationalization with the user's chosen language.
    4. Builds the panel and its view and runs the application event loop.

    Returns:
        An integer exit code.
    """
    setup_logging()
    logger = logging.getLogger("LocationPanel.Main")

    # The QApplication must be created before any UI elements.
    app = QApplication(sys.argv)

    i18n_strings: Optional[constants.i18n.I18nStrings] = None

    try:
        config_manager = ConfigManager()
        config = config_manager.load()

        i18n_strings = constants.i18n.get_i18n(config.get("language"))

        authority = SettingsModeAuthority(config_manager)
        recent_source = RecentLocationApps(resolve_recent_apps_log(config), i18n_strings)
        channel = ChangeChannel(INJECTED_SETTINGS_CHANNEL)
        authority.config_file_changed.connect(channel.notify)

        panel = LocationSettingsPanel(
            authority=authority,
            recent_source=recent_source,
            injected_sources=lambda: build_injected_sources(config_manager),
            settings_changed_channel=channel,
            i18n=i18n_strings,
            hide_headers=config["hide_headers"],
        )
        view = LocationSettingsView(panel, i18n_strings)
        panel.mode_screen_requested.connect(lambda: logger.info("Mode screen requested."))
        panel.entry_activated.connect(lambda entry: logger.info("Entry activated: %s", entry.key))

        panel.on_create()
        panel.on_start()
        panel.on_resume()

        def shutdown() -> None:
            panel.on_pause()
            panel.on_stop()
            channel.teardown()

        app.aboutToQuit.connect(shutdown)

        signal.signal(signal.SIGINT, lambda s, f: QApplication.instance().quit())
        signal.signal(signal.SIGTERM, lambda s, f: QApplication.instance().quit())

        # Show the view after a short delay to ensure the event loop is running.
        QTimer.singleShot(constants.timeouts.WINDOW_SHOW_DELAY_MS, view.show)

        return app.exec()

    except Exception as e:
        # This is a global catch-all for any critical error during startup.
        logger.critical("A critical error occurred during startup: %s", e, exc_info=True)
        title = i18n_strings.ERROR_WINDOW_TITLE if i18n_strings else "Application Error"
        QMessageBox.critical(None, title, f"A critical error occurred and LocationPanel must close:\n\n{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
