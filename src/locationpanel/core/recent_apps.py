"""
Recent location requests.

Reads a JSON log of location requests made by apps and reports the apps that
asked within the recent window. The list is a point-in-time snapshot; it is
re-read only when the panel rebuilds.

Log format: a list of objects with `package`, `label`, `last_access` (epoch
seconds) and `high_power` (bool).
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from locationpanel import constants
from locationpanel.core.entries import DisplayEntry, EntrySource

logger = logging.getLogger("LocationPanel.RecentLocationApps")


class RecentLocationApps:
    """Lists the apps that requested location within the recent window."""

    def __init__(self, log_path: Union[str, Path], i18n,
                 clock: Callable[[], float] = time.time) -> None:
        self.log_path = Path(log_path)
        self.i18n = i18n
        self._clock = clock

    def _read_log(self) -> List[Dict[str, Any]]:
        if not self.log_path.exists():
            logger.debug("No location request log at %s.", self.log_path)
            return []
        try:
            with self.log_path.open("r", encoding="utf-8") as f:
                records = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to read location request log %s: %s", self.log_path, e)
            return []
        if not isinstance(records, list):
            logger.error("Location request log %s is not a list; ignoring it.", self.log_path)
            return []
        return [record for record in records if isinstance(record, dict)]

    def list(self) -> List[DisplayEntry]:
        """Returns one entry per app, for its latest request within the window."""
        cutoff = self._clock() - constants.location.recent.RECENT_WINDOW_SECONDS
        latest: Dict[str, Dict[str, Any]] = {}
        for record in self._read_log():
            package = record.get("package")
            last_access = record.get("last_access")
            if not isinstance(package, str) or not package:
                continue
            if not isinstance(last_access, (int, float)) or last_access < cutoff:
                continue
            current = latest.get(package)
            if current is None or last_access > current["last_access"]:
                latest[package] = record

        entries = []
        for package, record in latest.items():
            summary_key = (constants.location.recent.HIGH_POWER_SUMMARY_KEY if record.get("high_power")
                           else constants.location.recent.LOW_POWER_SUMMARY_KEY)
            label: Optional[str] = record.get("label") if isinstance(record.get("label"), str) else None
            entries.append(DisplayEntry(
                title=label or package,
                summary=self.i18n.get(summary_key),
                source=EntrySource.RECENT_APP,
                key=package,
            ))
        return entries
