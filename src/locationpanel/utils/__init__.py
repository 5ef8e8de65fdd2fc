"""
Utilities submodule for LocationPanel.

Provides helper functions and configuration management.
"""

from .config import ConfigManager, ConfigError
from .helpers import setup_logging, get_app_data_path

__all__ = ["ConfigManager", "ConfigError", "setup_logging", "get_app_data_path"]
