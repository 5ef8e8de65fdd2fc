"""
Display entries and the sorted list builders for the two entry sections.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional


class EntrySource(enum.Enum):
    """Where a display entry came from."""
    RECENT_APP = "recent_app"
    INJECTED_SERVICE = "injected_service"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class DisplayEntry:
    """
    One row of a display list. Immutable; a changed summary produces a new entry
    via `dataclasses.replace`.

    Attributes:
        title: Text shown as the row title; also the sort key.
        enabled: Whether the row is drawn as enabled.
        selectable: Whether activating the row does anything.
        summary: Secondary text, if any.
        source: The section/source kind of the row.
        key: Identifies the row within its source. Defaults to the title.
    """
    title: str
    enabled: bool = True
    selectable: bool = True
    summary: Optional[str] = None
    source: EntrySource = EntrySource.RECENT_APP
    key: str = field(default="")

    def __post_init__(self) -> None:
        if not self.key:
            object.__setattr__(self, "key", self.title)


def _title_code_units(entry: DisplayEntry) -> bytes:
    # Big-endian UTF-16 bytes compare in the same order as the UTF-16 code units.
    return entry.title.encode("utf-16-be", "surrogatepass")


def sort_entries(entries: Iterable[DisplayEntry]) -> List[DisplayEntry]:
    """
    Returns the entries sorted by title.

    The comparison is ordinal over UTF-16 code units and case-sensitive, not
    locale-aware. The sort is stable: entries with equal titles keep their input order.
    """
    return sorted(entries, key=_title_code_units)


def build_recent_list(entries: Iterable[DisplayEntry], placeholder_title: str) -> List[DisplayEntry]:
    """
    Builds the recent location requests list. An empty source yields a single
    non-selectable placeholder row.
    """
    ordered = sort_entries(entries)
    if ordered:
        return ordered
    return [DisplayEntry(
        title=placeholder_title,
        enabled=True,
        selectable=False,
        source=EntrySource.PLACEHOLDER,
    )]


def build_services_list(entries: Iterable[DisplayEntry]) -> List[DisplayEntry]:
    """
    Builds the injected location services list. An empty source yields an empty
    list, and the caller hides the whole section.
    """
    return sort_entries(entries)
