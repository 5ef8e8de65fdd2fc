"""
Internationalization strings for the LocationPanel application.

Strings live in `locales/<language>.json`. Lookups fall back to en_US for keys
missing from the active language.
"""

import json
import locale
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger("LocationPanel.I18n")
strings: Optional["I18nStrings"] = None

LOCALES_PATH = Path(__file__).parent / "locales"
FALLBACK_LANGUAGE = "en_US"


def get_i18n(language_code: Optional[str] = None) -> "I18nStrings":
    """Initializes (if needed) and returns the global i18n singleton."""
    global strings
    if strings is None:
        strings = I18nStrings(language_code)
    return strings


def _system_language() -> str:
    try:
        code = locale.getlocale(locale.LC_CTYPE)[0]
    except ValueError as e:
        logger.warning("Failed to read the system locale: %s", e)
        code = None
    return code or FALLBACK_LANGUAGE


class I18nStrings:
    """
    Translated strings, read as attributes (`i18n.HELP_LABEL`) or by key held in
    a constant (`i18n.get(key)`).
    """

    SUPPORTED_LANGUAGES = ("en_US", "de_DE")

    def __init__(self, language_code: Optional[str] = None) -> None:
        self._fallback_strings = self._load_language(FALLBACK_LANGUAGE)
        if not self._fallback_strings:
            raise RuntimeError("Failed to load base English (en_US) language file. Application cannot continue.")
        self._strings: Dict[str, str] = self._fallback_strings
        self.language = FALLBACK_LANGUAGE
        self.set_language(self._resolve(language_code or _system_language()))

    @classmethod
    def _resolve(cls, requested: str) -> str:
        """Maps a requested locale to a supported language, matching on the base language if needed."""
        normalized = requested.replace("-", "_")
        if normalized in cls.SUPPORTED_LANGUAGES:
            return normalized
        base = normalized.split("_")[0] + "_"
        return next((lang for lang in cls.SUPPORTED_LANGUAGES if lang.startswith(base)), FALLBACK_LANGUAGE)

    @staticmethod
    def _load_language(lang_code: str) -> Dict[str, str]:
        lang_file = LOCALES_PATH / f"{lang_code}.json"
        try:
            with lang_file.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load or parse language file %s: %s", lang_file, e)
            return {}

    def set_language(self, language_code: str) -> None:
        """Switches the active language. Unsupported languages fall back to en_US."""
        if language_code not in self.SUPPORTED_LANGUAGES:
            logger.warning("Language '%s' is not supported. Falling back to en_US.", language_code)
            language_code = FALLBACK_LANGUAGE
        loaded = self._fallback_strings if language_code == FALLBACK_LANGUAGE else self._load_language(language_code)
        if not loaded:
            logger.error("Failed to load strings for '%s'. Using English fallbacks.", language_code)
            loaded = self._fallback_strings
        self.language = language_code
        self._strings = loaded
        logger.info("Effective language: %s", self.language)

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        value = self._strings.get(name)
        if value is None:
            value = self._fallback_strings.get(name)
        if not isinstance(value, str):
            raise AttributeError(f"String constant '{name}' is missing from all language definitions.")
        return value

    def get(self, key: str) -> str:
        """Looks up a string by its key, for keys held in constants."""
        return getattr(self, key)
