"""Revenue summary across the whole ledger.

Produces the headline figures of the studio dashboard (total revenue,
billable hours, active projects) and a per-project revenue table built with
pandas for reporting and export.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable

import pandas as pd

from invoice_engine.aggregators.entry_ordering import UNASSIGNED_PROJECT
from invoice_engine.calculators.rate_resolver import ZERO, price_entries
from invoice_engine.models.client import Project, ProjectStatus
from invoice_engine.models.ledger import EntryType, LedgerEntry

logger = logging.getLogger(__name__)

REVENUE_COLUMNS = [
    "project",
    "client",
    "hours",
    "time_revenue",
    "other_revenue",
    "revenue",
    "profit",
]


@dataclass
class RevenueSummary:
    """Headline revenue figures.

    Attributes:
        total_revenue: Sum of resolved amounts of all entries
        total_hours: Sum of hours on time entries
        total_profit: Sum of tracked profit (time entries excluded)
        active_projects: Number of projects with ACTIVE status
        by_project: One row per project, sorted by revenue descending
    """

    total_revenue: Decimal
    total_hours: Decimal
    total_profit: Decimal
    active_projects: int
    by_project: pd.DataFrame


def summarize_revenue(
    entries: Iterable[LedgerEntry], projects: Iterable[Project]
) -> RevenueSummary:
    """Summarize revenue per project.

    Entries whose project is missing still count towards the totals and are
    reported under "Unassigned".

    Args:
        entries: Ledger entries to summarize
        projects: Project directory

    Returns:
        RevenueSummary with totals and a per-project DataFrame
    """
    projects = list(projects)
    priced = price_entries(entries, projects)

    rows: Dict[str, Dict[str, object]] = {}
    for p in priced:
        name = p.project.name if p.project else UNASSIGNED_PROJECT
        row = rows.setdefault(
            name,
            {
                "project": name,
                "client": p.project.client_id if p.project else "",
                "hours": ZERO,
                "time_revenue": ZERO,
                "other_revenue": ZERO,
                "revenue": ZERO,
                "profit": ZERO,
            },
        )
        if p.entry.type == EntryType.TIME:
            row["hours"] += p.entry.hours
            row["time_revenue"] += p.amount
        else:
            row["other_revenue"] += p.amount
        row["revenue"] += p.amount
        if p.resolution.profit is not None:
            row["profit"] += p.resolution.profit

    df = pd.DataFrame(list(rows.values()), columns=REVENUE_COLUMNS)
    if not df.empty:
        df = df.sort_values(by=["revenue", "project"], ascending=[False, True])
        df = df.reset_index(drop=True)

    summary = RevenueSummary(
        total_revenue=sum((r["revenue"] for r in rows.values()), ZERO),
        total_hours=sum((r["hours"] for r in rows.values()), ZERO),
        total_profit=sum((r["profit"] for r in rows.values()), ZERO),
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        by_project=df,
    )
    logger.info(
        f"Summarized {len(priced)} entries across {len(rows)} projects: "
        f"revenue {summary.total_revenue}"
    )
    return summary
