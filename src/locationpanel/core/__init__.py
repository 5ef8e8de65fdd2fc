"""
Core submodule for LocationPanel.

Contains the mode reconciliation, list aggregation and subscription logic,
and the panel that wires them together.
"""

from locationpanel.core.entries import DisplayEntry, EntrySource, sort_entries
from locationpanel.core.mode import LocationMode, UiState
from locationpanel.core.panel import LocationSettingsPanel
from locationpanel.core.reconciler import ModeStateReconciler

__all__ = [
    "DisplayEntry",
    "EntrySource",
    "LocationMode",
    "LocationSettingsPanel",
    "ModeStateReconciler",
    "UiState",
    "sort_entries",
]
