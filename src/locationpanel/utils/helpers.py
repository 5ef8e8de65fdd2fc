"""
Helper utilities for LocationPanel.

This module provides foundational functions for directory management and
logging setup used across the application.
"""

import os
import sys
import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from locationpanel import constants

# Thread lock for logging setup
_logging_lock: threading.Lock = threading.Lock()


def get_app_data_path() -> Path:
    """
    Retrieve the application data directory path.

    Uses APPDATA on Windows and XDG_CONFIG_HOME (or ~/.config) elsewhere.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    base: Optional[str] = os.getenv("APPDATA") or os.getenv("XDG_CONFIG_HOME")
    if not base:
        base = os.path.join(os.path.expanduser("~"), ".config")
        logger.debug("No APPDATA/XDG_CONFIG_HOME set, using %s", base)
    path: Path = Path(base) / constants.app.APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("App data path ensured: %s", path)
        return path
    except PermissionError as e:
        logger.error("Permission denied creating app data directory %s: %s", path, e)
        raise PermissionError(f"Cannot access app data directory: {path}. Please check permissions.") from e
    except OSError as e:
        logger.error("Failed to create app data directory %s: %s", path, e)
        raise OSError(f"Error with app data directory: {path}. Check disk space or path validity.") from e


def setup_logging() -> logging.Logger:
    """
    Configure logging with both a rotating file handler and a console handler in a thread-safe manner.
    """
    logger: logging.Logger = logging.getLogger(constants.app.APP_NAME)
    with _logging_lock:
        if not logger.handlers:
            is_production = os.environ.get(constants.app.ENV_VAR_PROD_MODE, "").lower() == "true"

            root_log_level = constants.logs.PRODUCTION_LOG_LEVEL if is_production else logging.DEBUG
            logger.setLevel(root_log_level)

            log_formatter = logging.Formatter(
                fmt=constants.logs.LOG_FORMAT, datefmt=constants.logs.LOG_DATE_FORMAT
            )

            file_log_level = constants.logs.PRODUCTION_LOG_LEVEL if is_production else constants.logs.FILE_LOG_LEVEL
            try:
                log_file_path: Path = get_app_data_path() / constants.logs.LOG_FILENAME
                file_handler: RotatingFileHandler = RotatingFileHandler(
                    log_file_path,
                    maxBytes=constants.logs.MAX_LOG_SIZE,
                    backupCount=constants.logs.LOG_BACKUP_COUNT,
                    encoding='utf-8',
                    delay=True  # Delays opening the file until the first log message
                )
                file_handler.setFormatter(log_formatter)
                file_handler.setLevel(file_log_level)
                logger.addHandler(file_handler)
            except (PermissionError, OSError) as e:
                print(f"CRITICAL: Failed to set up file logging: {e}. File logging will be disabled.", file=sys.stderr)

            console_handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(log_formatter)
            console_log_level = constants.logs.PRODUCTION_LOG_LEVEL if is_production else constants.logs.CONSOLE_LOG_LEVEL
            console_handler.setLevel(console_log_level)
            logger.addHandler(console_handler)

            if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
                logger.info("File logging target: %s, Level: %s",
                            get_app_data_path() / constants.logs.LOG_FILENAME, logging.getLevelName(file_log_level))
            else:
                logger.warning("File logging is NOT active due to previous errors.")
            logger.info("Application logging initialized. Production mode: %s. Root Log Level: %s.",
                        is_production, logging.getLevelName(root_log_level))

    return logger
