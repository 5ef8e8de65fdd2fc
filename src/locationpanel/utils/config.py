"""
Configuration management for LocationPanel.

This module provides a ConfigManager for loading, validating, and saving application
settings to a JSON file. It ensures data integrity through atomic writes, default value
merging, and strict validation, preventing corrupted or invalid configurations from
affecting the panel.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .helpers import get_app_data_path
from locationpanel import constants


class ConfigError(Exception):
    """Custom exception for configuration-related errors, such as I/O or permission issues."""


class ConfigManager:
    """
    Manages loading, saving, and validation of LocationPanel's configuration.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        self.config_path = Path(config_path) if config_path else get_app_data_path() / constants.config.defaults.CONFIG_FILENAME
        self.logger = logging.getLogger("LocationPanel.Config")
        self._last_config: Optional[Dict[str, Any]] = None


    def _validate_boolean(self, key: str, value: Any, default: bool) -> bool:
        """Validates a value is a boolean."""
        if isinstance(value, bool):
            return value
        self.logger.warning(constants.config.messages.INVALID_BOOLEAN.format(key=key, value=value, default=default))
        return default


    def _validate_choice(self, key: str, value: Any, default: Any, choices: List[Any]) -> Any:
        """Validates a value is one of the allowed choices."""
        # bool is an int subclass; True must not pass for mode 1.
        if not isinstance(value, bool) and value in choices:
            return value
        self.logger.warning(constants.config.messages.INVALID_CHOICE.format(key=key, value=value, default=default, choices=choices))
        return default


    def _validate_services(self, value: Any) -> List[Dict[str, str]]:
        """Keeps only well-formed injected service declarations."""
        if not isinstance(value, list):
            return []
        services = []
        for item in value:
            if not isinstance(item, dict) or not isinstance(item.get("title"), str) or not item["title"]:
                self.logger.warning(constants.config.messages.INVALID_SERVICE.format(value=item))
                continue
            service = {"title": item["title"]}
            for optional in ("key", "status"):
                if isinstance(item.get(optional), str):
                    service[optional] = item[optional]
            services.append(service)
        return services


    def _validate_config(self, loaded_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validates the configuration, merges it with defaults for missing keys,
        and sanitizes all values.
        """
        validated = constants.config.defaults.DEFAULT_CONFIG.copy()
        validated.update(loaded_config)
        default_ref = constants.config.defaults.DEFAULT_CONFIG

        unknown_keys = set(loaded_config.keys()) - set(default_ref.keys())
        if unknown_keys:
            self.logger.warning("Ignoring unknown config fields: %s", ", ".join(sorted(unknown_keys)))

        for key in ["restricted", "hide_headers"]:
            validated[key] = self._validate_boolean(key, validated.get(key), default_ref[key])

        validated["location_mode"] = self._validate_choice(
            "location_mode", validated.get("location_mode"), default_ref["location_mode"],
            sorted(constants.location.mode.SUMMARY_KEYS.keys()))

        supported_languages = list(constants.i18n.I18nStrings.SUPPORTED_LANGUAGES)
        if validated.get("language") not in [None] + supported_languages:
            validated["language"] = None

        log_path = validated.get("recent_apps_log")
        if log_path is not None and not (isinstance(log_path, str) and log_path):
            self.logger.warning(constants.config.messages.INVALID_PATH.format(key="recent_apps_log", value=log_path))
            validated["recent_apps_log"] = None

        validated["injected_services"] = self._validate_services(validated.get("injected_services"))

        return {key: validated[key] for key in default_ref if key in validated}


    def load(self) -> Dict[str, Any]:
        """Loads and validates the configuration from the file."""
        if not self.config_path.exists():
            self.logger.info("Configuration file not found. Creating with default settings.")
            return self.reset_to_defaults()
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError:
            self.logger.error("Configuration file is corrupt. Backing it up and using defaults.")
            try:
                corrupt_path = self.config_path.with_name(f"{self.config_path.name}.corrupt")
                shutil.move(self.config_path, corrupt_path)
            except Exception:
                self.logger.exception("Failed to back up corrupt config file.")
            return self.reset_to_defaults()
        except OSError as e:
            msg = f"OS error reading config file {self.config_path}: {e}"
            self.logger.critical(msg)
            raise ConfigError(msg) from e

        if not isinstance(config, dict):
            self.logger.error("Configuration root is not an object. Using defaults.")
            return self.reset_to_defaults()

        validated_config = self._validate_config(config)
        self._last_config = validated_config.copy()
        return validated_config


    def save(self, config: Dict[str, Any]) -> None:
        """Atomically saves the provided configuration to the file."""
        validated_config = self._validate_config(config)

        config_to_save = {key: value for key, value in validated_config.items() if value is not None}
        last_config_to_compare = {k: v for k, v in self._last_config.items() if v is not None} if self._last_config else None

        if last_config_to_compare == config_to_save:
            self.logger.debug("Skipping save, configuration is unchanged.")
            return

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=self.config_path.parent, encoding="utf-8"
            ) as temp_f:
                json.dump(config_to_save, temp_f, indent=4)
                temp_path = temp_f.name
            shutil.move(temp_path, self.config_path)
            self._last_config = validated_config.copy()
            self.logger.debug("Configuration saved successfully to %s", self.config_path)
        except OSError as e:
            msg = f"Failed to save configuration to {self.config_path}: {e}"
            self.logger.error(msg)
            raise ConfigError(msg) from e


    def reset_to_defaults(self) -> Dict[str, Any]:
        """Resets the configuration to factory defaults and saves it."""
        self.logger.info("Resetting configuration to default values.")
        defaults = constants.config.defaults.DEFAULT_CONFIG.copy()
        defaults["injected_services"] = []
        self.save(defaults)
        return defaults
