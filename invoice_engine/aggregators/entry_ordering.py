"""Presentation order of invoice line items.

Entries are weighted so that media fees and retainers lead an invoice and
routine meetings sink to the bottom regardless of date:

    MEDIA_SPEND                                   10
    FIXED_FEE, or "retainer" in the description   20
    everything else                               50
    "stand up" or "meeting" in the description    90

Within a weight, newer entries come first. The entry id breaks any
remaining tie, so the order is total and sorting sorted output is a no-op.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from invoice_engine.calculators.rate_resolver import ZERO, PricedEntry
from invoice_engine.models.ledger import EntryType, LedgerEntry

logger = logging.getLogger(__name__)

MEDIA_WEIGHT = 10
RETAINER_WEIGHT = 20
DEFAULT_WEIGHT = 50
MEETING_WEIGHT = 90

UNASSIGNED_PROJECT = "Unassigned"


def entry_weight(entry: LedgerEntry) -> int:
    """Ordering weight of an entry; lower sorts first.

    Example:
        >>> entry_weight(FixedFeeEntry(id="f1", project_id="p1",
        ...     date=dt.date(2024, 5, 1), amount=5000))
        20
    """
    description = entry.description.lower()
    if entry.type == EntryType.MEDIA_SPEND:
        return MEDIA_WEIGHT
    if entry.type == EntryType.FIXED_FEE or "retainer" in description:
        return RETAINER_WEIGHT
    if "stand up" in description or "meeting" in description:
        return MEETING_WEIGHT
    return DEFAULT_WEIGHT


def entry_sort_key(entry: LedgerEntry) -> Tuple[int, int, str]:
    """Sort key: weight ascending, date descending, id ascending."""
    return (entry_weight(entry), -entry.date.toordinal(), entry.id)


def order_entries(entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
    """Sort ledger entries into invoice presentation order."""
    return sorted(entries, key=entry_sort_key)


def order_priced_entries(priced_entries: Iterable[PricedEntry]) -> List[PricedEntry]:
    """Sort priced entries into invoice presentation order."""
    return sorted(priced_entries, key=lambda p: entry_sort_key(p.entry))


@dataclass(frozen=True)
class ProjectGroup:
    """Entries of one project on a multi-project invoice.

    Attributes:
        project_id: Project identifier (None for orphaned entries)
        project_name: Project name, or "Unassigned"
        entries: Priced entries in presentation order
        subtotal: Sum of resolved amounts in the group
    """

    project_id: Optional[str]
    project_name: str
    entries: Tuple[PricedEntry, ...]
    subtotal: Decimal


def group_by_project(priced_entries: Iterable[PricedEntry]) -> List[ProjectGroup]:
    """Group priced entries by project.

    Groups appear in the order their project is first seen; entries inside a
    group are ordered with :func:`entry_sort_key`. Entries whose project is
    not in the directory are collected under "Unassigned" instead of failing
    the batch.

    Args:
        priced_entries: Priced entries, typically already ordered

    Returns:
        List of ProjectGroup with per-group subtotals
    """
    buckets: Dict[Optional[str], List[PricedEntry]] = {}
    names: Dict[Optional[str], str] = {}

    for priced in priced_entries:
        key = priced.project.id if priced.project is not None else None
        if key not in buckets:
            buckets[key] = []
            names[key] = priced.project.name if priced.project else UNASSIGNED_PROJECT
        buckets[key].append(priced)

    if None in buckets:
        logger.warning(
            f"{len(buckets[None])} entries reference unknown projects; "
            f"grouped under '{UNASSIGNED_PROJECT}'"
        )

    groups = []
    for key, members in buckets.items():
        ordered = order_priced_entries(members)
        groups.append(
            ProjectGroup(
                project_id=key,
                project_name=names[key],
                entries=tuple(ordered),
                subtotal=sum((p.amount for p in ordered), ZERO),
            )
        )
    return groups
