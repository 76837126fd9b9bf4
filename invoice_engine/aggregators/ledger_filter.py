"""Ledger filtering for invoice generation.

Selects the ledger entries relevant to one client, optionally narrowed to a
single project and a date window. The result order is not meaningful; see
:mod:`invoice_engine.aggregators.entry_ordering` for presentation order.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from invoice_engine.models.client import Project
from invoice_engine.models.ledger import LedgerEntry

logger = logging.getLogger(__name__)

ALL_PROJECTS = "all"


class DateFilterType(str, Enum):
    """Kinds of date window."""

    ALL = "ALL"
    MONTH = "MONTH"
    RANGE = "RANGE"


@dataclass(frozen=True)
class DateWindow:
    """Date window applied to ledger entries.

    A MONTH window without a month, or a RANGE window missing either
    bound, does not filter anything.

    Attributes:
        kind: ALL, MONTH or RANGE
        month: Month in YYYY-MM form (MONTH windows)
        start: Inclusive start date (RANGE windows)
        end: Inclusive end date (RANGE windows)

    Example:
        >>> window = DateWindow.for_month("2024-05")
        >>> window.contains(dt.date(2024, 5, 31))
        True
    """

    kind: DateFilterType = DateFilterType.ALL
    month: Optional[str] = None
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @classmethod
    def all(cls) -> "DateWindow":
        return cls()

    @classmethod
    def for_month(cls, month: str) -> "DateWindow":
        return cls(kind=DateFilterType.MONTH, month=month)

    @classmethod
    def between(cls, start: dt.date, end: dt.date) -> "DateWindow":
        return cls(kind=DateFilterType.RANGE, start=start, end=end)

    @property
    def is_active(self) -> bool:
        """True if the window actually restricts dates."""
        if self.kind == DateFilterType.MONTH:
            return bool(self.month)
        if self.kind == DateFilterType.RANGE:
            return self.start is not None and self.end is not None
        return False

    def contains(self, date: dt.date) -> bool:
        """Check whether a date falls inside the window."""
        if not self.is_active:
            return True
        if self.kind == DateFilterType.MONTH:
            # ISO dates are zero-padded, so a string prefix selects the month
            return date.isoformat().startswith(self.month)
        return self.start <= date <= self.end


def filter_entries(
    entries: Iterable[LedgerEntry],
    projects: Iterable[Project],
    client_id: str,
    project_id: Optional[str] = None,
    date_window: Optional[DateWindow] = None,
) -> List[LedgerEntry]:
    """Select the entries billable to a client.

    Steps:
    1. Keep entries whose project belongs to ``client_id``; entries whose
       project cannot be found are dropped
    2. Keep only ``project_id`` unless it is None or "all"
    3. Apply the date window

    Args:
        entries: All ledger entries
        projects: Project directory
        client_id: Client to bill
        project_id: Optional single project, or "all"
        date_window: Optional date window

    Returns:
        Matching entries, in input order

    Example:
        >>> selected = filter_entries(
        ...     entries,
        ...     projects,
        ...     "Acme Corp",
        ...     date_window=DateWindow.for_month("2024-05"),
        ... )
    """
    project_map = {p.id: p for p in projects}
    window = date_window or DateWindow.all()
    single_project = project_id and project_id.lower() != ALL_PROJECTS

    selected = []
    dropped_orphans = 0
    for entry in entries:
        project = project_map.get(entry.project_id)
        if project is None:
            dropped_orphans += 1
            continue
        if project.client_id != client_id:
            continue
        if single_project and entry.project_id != project_id:
            continue
        if not window.contains(entry.date):
            continue
        selected.append(entry)

    if dropped_orphans:
        logger.debug(f"Skipped {dropped_orphans} entries without a known project")
    logger.info(f"Selected {len(selected)} entries for client {client_id}")
    return selected
