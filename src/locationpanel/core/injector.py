"""
Injected location services.

External apps contribute status rows to the panel. The registry holds the rows
of every injected source and refreshes their status text on a background worker
thread; results are applied back on the registry's own thread, so all row state
is only ever touched there.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from locationpanel.core.entries import DisplayEntry, EntrySource

logger = logging.getLogger("LocationPanel.InjectedServices")

# Worker threads of closed registries, held until they finish.
_retired_threads: Set[QThread] = set()

StatusKey = Tuple[str, str]


def _prune_retired_threads() -> None:
    for thread in [t for t in _retired_threads if t.isFinished()]:
        _retired_threads.discard(thread)


class InjectedServiceSource:
    """
    Interface of a source of injected service rows.

    Subclasses provide `list()` for the current rows and `query_status()` for the
    up-to-date status text of one row. `query_status` runs on a worker thread.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def list(self) -> List[DisplayEntry]:
        raise NotImplementedError

    def query_status(self, entry: DisplayEntry) -> Optional[str]:
        raise NotImplementedError


def _service_key(service: Dict[str, Any]) -> str:
    return service.get("key") or service["title"]


class StaticInjectedSource(InjectedServiceSource):
    """
    A source whose rows are declared up front (e.g. in the configuration file).

    Each declaration is a dict with a `title` and optional `key` and `status`.
    Status text is taken from `status_provider` when given, else from the declaration.
    """

    def __init__(self, name: str, services: Iterable[Dict[str, Any]],
                 status_provider: Optional[Callable[[DisplayEntry], Optional[str]]] = None) -> None:
        super().__init__(name)
        self._services = [dict(service) for service in services]
        self._status_provider = status_provider

    def list(self) -> List[DisplayEntry]:
        return [
            DisplayEntry(
                title=service["title"],
                key=_service_key(service),
                summary=service.get("status"),
                source=EntrySource.INJECTED_SERVICE,
            )
            for service in self._services
        ]

    def query_status(self, entry: DisplayEntry) -> Optional[str]:
        if self._status_provider is not None:
            return self._status_provider(entry)
        for service in self._services:
            if _service_key(service) == entry.key:
                return service.get("status")
        return None


class InjectedStatusWorker(QObject):
    """
    Queries status text for a batch of injected rows. Lives on a background thread.

    Signals:
        statuses_ready (dict): {(source name, entry key): status text or None}
    """
    statuses_ready = pyqtSignal(object)

    def __init__(self) -> None:
        super().__init__()
        self.logger = logging.getLogger("LocationPanel.InjectedStatusWorker")

    @pyqtSlot(object)
    def load_statuses(self, requests: List[Tuple[InjectedServiceSource, DisplayEntry]]) -> None:
        statuses: Dict[StatusKey, Optional[str]] = {}
        for source, entry in requests:
            try:
                statuses[(source.name, entry.key)] = source.query_status(entry)
            except Exception as e:
                # Keep the previous summary for this row.
                self.logger.warning("Status query failed for '%s' from '%s': %s", entry.key, source.name, e)
        self.statuses_ready.emit(statuses)


class InjectedServiceRegistry(QObject):
    """
    Holds the injected service rows and keeps their status text fresh.

    `load()` returns a synchronous snapshot. `refresh()` is fire-and-forget: it
    re-queries every known row on the worker thread and returns immediately; the
    completion updates summaries in place (membership and order unchanged) and
    emits `entries_changed`. After `close()`, completions are discarded.

    Signals:
        entries_changed (list): The new snapshot, in source order.
    """
    entries_changed = pyqtSignal(object)
    _reload_requested = pyqtSignal(object)

    def __init__(self, sources: Iterable[InjectedServiceSource], parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logger
        self._sources: List[InjectedServiceSource] = list(sources)
        self._rows: List[Tuple[InjectedServiceSource, DisplayEntry]] = []
        self._summaries: Dict[StatusKey, Optional[str]] = {}
        self._closed = False
        self._worker_thread: Optional[QThread] = None
        self._worker: Optional[InjectedStatusWorker] = None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Starts the status worker thread. Called lazily by `refresh()` if needed."""
        if self._worker_thread is not None or self._closed:
            return
        self._worker_thread = QThread()
        self._worker = InjectedStatusWorker()
        self._worker.moveToThread(self._worker_thread)
        self._worker.statuses_ready.connect(self._on_statuses_ready)
        self._reload_requested.connect(self._worker.load_statuses)
        self._worker_thread.start()
        self.logger.debug("Status worker started for %d source(s).", len(self._sources))

    def load(self) -> List[DisplayEntry]:
        """Lists the rows of every source, with the latest known status text applied."""
        rows: List[Tuple[InjectedServiceSource, DisplayEntry]] = []
        for source in self._sources:
            try:
                listed = source.list()
            except Exception as e:
                self.logger.error("Failed to list injected services from '%s': %s", source.name, e, exc_info=True)
                continue
            for entry in listed:
                key = (source.name, entry.key)
                if key in self._summaries:
                    entry = replace(entry, summary=self._summaries[key])
                rows.append((source, entry))
        self._rows = rows
        return self.entries()

    def entries(self) -> List[DisplayEntry]:
        """The current rows, in source order."""
        return [entry for _, entry in self._rows]

    def refresh(self) -> None:
        """Requests fresh status text for every known row. Does not block."""
        if self._closed:
            self.logger.debug("Ignoring refresh on a closed registry.")
            return
        if not self._rows:
            return
        self.start()
        self._reload_requested.emit(list(self._rows))

    @pyqtSlot(object)
    def _on_statuses_ready(self, statuses: Dict[StatusKey, Optional[str]]) -> None:
        if self._closed:
            self.logger.debug("Discarding %d status result(s) that arrived after close.", len(statuses))
            return
        self._summaries.update(statuses)

        changed = False
        rows = []
        for source, entry in self._rows:
            key = (source.name, entry.key)
            if key in statuses and statuses[key] != entry.summary:
                entry = replace(entry, summary=statuses[key])
                changed = True
            rows.append((source, entry))
        self._rows = rows

        if changed:
            self.entries_changed.emit(self.entries())

    def close(self) -> None:
        """Tears the registry down. In-flight queries run to completion and are discarded."""
        if self._closed:
            return
        self._closed = True
        if self._worker_thread is None:
            return
        thread, worker = self._worker_thread, self._worker
        self._worker_thread = None
        self._worker = None
        _prune_retired_threads()
        # An in-flight query runs to completion on its own; keep the thread alive until it stops.
        thread.quit()
        thread._worker = worker
        _retired_threads.add(thread)
        self.logger.debug("Injected service registry closed.")
