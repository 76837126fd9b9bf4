"""Rate resolution for ledger entries.

This module determines the billable amount and the profit attributable to a
single ledger entry:
- TIME: hours x effective rate x rate multiplier (profit is not tracked)
- EXPENSE: cost marked up by a percentage
- FIXED_FEE: the declared amount, all of it margin
- MEDIA_SPEND: three percentage fees on the underlying ad spend

Resolution is a pure function of the entry and its project. Inputs are not
validated here (negative hours are priced as given); arithmetic that cannot
produce a finite Decimal is clamped to zero and flagged instead of leaking
into invoice totals.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, DecimalException
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from invoice_engine.models.client import Project
from invoice_engine.models.ledger import (
    EntryType,
    ExpenseEntry,
    FixedFeeEntry,
    LedgerEntry,
    MediaSpendEntry,
    TimeEntry,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

# Media-spend fee tiers, as fractions of total ad spend (19.5% combined)
MEDIA_MANAGEMENT_FEE_RATE = Decimal("0.125")
MEDIA_OPERATIONS_FEE_RATE = Decimal("0.040")
MEDIA_PERFORMANCE_FEE_RATE = Decimal("0.030")
MEDIA_TOTAL_FEE_RATE = (
    MEDIA_MANAGEMENT_FEE_RATE + MEDIA_OPERATIONS_FEE_RATE + MEDIA_PERFORMANCE_FEE_RATE
)

# Diagnostic flags attached to resolutions and line items
NON_FINITE_AMOUNT = "non_finite_amount"
ZERO_QUANTITY = "zero_quantity"
MISSING_RATE = "missing_rate"
MISSING_PROJECT = "missing_project"


@dataclass(frozen=True)
class MediaFeeBreakdown:
    """The three fees levied on media spend.

    Attributes:
        management_fee: Media management fee (12.5% of spend)
        operations_fee: Creative operations fee (4.0% of spend)
        performance_fee: Performance/ROI fee (3.0% of spend)
    """

    management_fee: Decimal
    operations_fee: Decimal
    performance_fee: Decimal

    @property
    def total(self) -> Decimal:
        """Sum of the three fees."""
        return self.management_fee + self.operations_fee + self.performance_fee


@dataclass(frozen=True)
class ResolvedAmount:
    """Monetary outcome of resolving one ledger entry.

    Attributes:
        amount: Billable amount of the entry
        profit: Margin on the entry, or None for time entries
        spend: Underlying ad spend (media entries only)
        fees: Fee breakdown (media entries only)
        diagnostics: Flags raised during resolution

    Example:
        >>> ResolvedAmount(amount=Decimal("120"), profit=Decimal("20")).is_clean
        True
    """

    amount: Decimal
    profit: Optional[Decimal] = None
    spend: Optional[Decimal] = None
    fees: Optional[MediaFeeBreakdown] = None
    diagnostics: Tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        """True if no diagnostic flag was raised."""
        return not self.diagnostics


@dataclass(frozen=True)
class PricedEntry:
    """A ledger entry together with its project and resolved amount.

    ``project`` is None when the entry references a project that is not in
    the directory; such entries are shown under "Unassigned".
    """

    entry: LedgerEntry
    project: Optional[Project]
    resolution: ResolvedAmount

    @property
    def amount(self) -> Decimal:
        return self.resolution.amount


def _finite(compute: Callable[[], Decimal], diagnostics: List[str]) -> Decimal:
    """Evaluate a Decimal computation, clamping failures to zero.

    Args:
        compute: Zero-argument callable performing the arithmetic
        diagnostics: List that receives NON_FINITE_AMOUNT on clamping

    Returns:
        The computed value, or zero if it was NaN, infinite or raised
    """
    try:
        value = compute()
    except DecimalException:
        value = None
    if value is None or not value.is_finite():
        if NON_FINITE_AMOUNT not in diagnostics:
            diagnostics.append(NON_FINITE_AMOUNT)
        return ZERO
    return value


def unit_rate(amount: Decimal, quantity: Decimal) -> Decimal:
    """Back-compute a unit rate from an amount and a quantity.

    Args:
        amount: Total amount of the line
        quantity: Number of units

    Returns:
        amount / quantity, or zero when quantity is zero or the result is
        not finite

    Example:
        >>> unit_rate(Decimal("90"), Decimal("3"))
        Decimal('30')
        >>> unit_rate(Decimal("90"), Decimal("0"))
        Decimal('0')
    """
    if quantity == ZERO:
        return ZERO
    return _finite(lambda: amount / quantity, [])


def calculate_media_fees(spend: Decimal) -> MediaFeeBreakdown:
    """Split media spend into its three fee tiers.

    Args:
        spend: Total ad spend

    Returns:
        MediaFeeBreakdown whose total is exactly 19.5% of spend

    Example:
        >>> calculate_media_fees(Decimal("1000")).total
        Decimal('195.000')
    """
    return MediaFeeBreakdown(
        management_fee=spend * MEDIA_MANAGEMENT_FEE_RATE,
        operations_fee=spend * MEDIA_OPERATIONS_FEE_RATE,
        performance_fee=spend * MEDIA_PERFORMANCE_FEE_RATE,
    )


def effective_hourly_rate(entry: TimeEntry, project: Optional[Project]) -> Decimal:
    """Hourly rate for a time entry before the multiplier is applied.

    The entry's own rate wins over the project rate. Without either the
    rate is zero.
    """
    if entry.rate is not None:
        return entry.rate
    if project is not None:
        return project.hourly_rate
    return ZERO


def rate_multiplier(entry: TimeEntry) -> Decimal:
    """Rate multiplier of a time entry, defaulting to 1."""
    return entry.rate_multiplier if entry.rate_multiplier is not None else ONE


def _resolve_time(entry: TimeEntry, project: Optional[Project]) -> ResolvedAmount:
    diagnostics: List[str] = []
    if entry.rate is None and project is None:
        diagnostics.append(MISSING_RATE)
    rate = effective_hourly_rate(entry, project)
    multiplier = rate_multiplier(entry)
    amount = _finite(lambda: entry.hours * rate * multiplier, diagnostics)
    return ResolvedAmount(amount=amount, diagnostics=tuple(diagnostics))


def _resolve_expense(entry: ExpenseEntry) -> ResolvedAmount:
    diagnostics: List[str] = []
    markup = entry.markup_percent if entry.markup_percent is not None else ZERO
    amount = _finite(lambda: entry.cost * (ONE + markup / HUNDRED), diagnostics)
    profit = _finite(lambda: amount - entry.cost, diagnostics)
    return ResolvedAmount(amount=amount, profit=profit, diagnostics=tuple(diagnostics))


def _resolve_fixed_fee(entry: FixedFeeEntry) -> ResolvedAmount:
    diagnostics: List[str] = []
    amount = _finite(lambda: entry.amount, diagnostics)
    return ResolvedAmount(amount=amount, profit=amount, diagnostics=tuple(diagnostics))


def _resolve_media_spend(entry: MediaSpendEntry) -> ResolvedAmount:
    diagnostics: List[str] = []
    spend = _finite(lambda: entry.spend, diagnostics)
    fees = calculate_media_fees(spend)
    # The ad spend itself is a pass-through cost, so the whole fee is margin
    return ResolvedAmount(
        amount=fees.total,
        profit=fees.total,
        spend=spend,
        fees=fees,
        diagnostics=tuple(diagnostics),
    )


def resolve(entry: LedgerEntry, project: Optional[Project]) -> ResolvedAmount:
    """Resolve the billable amount and profit of a single ledger entry.

    Args:
        entry: Ledger entry of any type
        project: The entry's project, or None if it cannot be found

    Returns:
        ResolvedAmount with amount, profit and diagnostics

    Example:
        >>> project = Project(id="p1", name="Brand", client_id="c1", hourly_rate=150)
        >>> entry = TimeEntry(
        ...     id="l1", project_id="p1", date=dt.date(2024, 5, 2), hours=8
        ... )
        >>> resolve(entry, project).amount
        Decimal('1200')
    """
    if entry.type == EntryType.TIME:
        resolution = _resolve_time(entry, project)
    elif entry.type == EntryType.EXPENSE:
        resolution = _resolve_expense(entry)
    elif entry.type == EntryType.FIXED_FEE:
        resolution = _resolve_fixed_fee(entry)
    else:
        resolution = _resolve_media_spend(entry)

    if not resolution.is_clean:
        logger.warning(
            f"Entry {entry.id} resolved with diagnostics: "
            f"{', '.join(resolution.diagnostics)}"
        )
    return resolution


def price_entries(
    entries: Iterable[LedgerEntry], projects: Iterable[Project]
) -> List[PricedEntry]:
    """Resolve every entry against its project.

    Args:
        entries: Ledger entries to price
        projects: Project directory

    Returns:
        List of PricedEntry in the same order as entries
    """
    project_map: Dict[str, Project] = {p.id: p for p in projects}
    priced = []
    for entry in entries:
        project = project_map.get(entry.project_id)
        priced.append(
            PricedEntry(
                entry=entry, project=project, resolution=resolve(entry, project)
            )
        )
    return priced


def annual_media_spend(
    entry: MediaSpendEntry,
    entries: Iterable[LedgerEntry],
    editing_entry_id: Optional[str] = None,
) -> Decimal:
    """Running total of media spend for the entry's project and year.

    Sums this entry's spend with every other media-spend entry of the same
    project in the same calendar year. The entry currently being edited is
    left out so that its stored (stale) spend is not counted twice. Used for
    display only, never for amounts.

    Args:
        entry: The media-spend entry being recorded
        entries: All ledger entries
        editing_entry_id: Id of the entry being edited, if any

    Returns:
        Year-to-date media spend including this entry

    Example:
        >>> january = MediaSpendEntry(
        ...     id="m1", project_id="p1", date=dt.date(2024, 1, 31), google_spend=1000
        ... )
        >>> february = MediaSpendEntry(
        ...     id="m2", project_id="p1", date=dt.date(2024, 2, 29), meta_spend=500
        ... )
        >>> annual_media_spend(february, [january])
        Decimal('1500')
    """
    excluded = {entry.id}
    if editing_entry_id:
        excluded.add(editing_entry_id)

    total = entry.spend
    for other in entries:
        if (
            other.type == EntryType.MEDIA_SPEND
            and other.id not in excluded
            and other.project_id == entry.project_id
            and other.date.year == entry.date.year
        ):
            total += other.spend
    return total
