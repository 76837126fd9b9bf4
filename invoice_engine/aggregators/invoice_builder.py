"""Invoice assembly from a ledger snapshot.

This module runs the full invoice pipeline:
1. Filter the ledger to the requested client, project and date window
2. Resolve the amount of every selected entry
3. Order entries for presentation and group them by project
4. Aggregate totals, applying the write-off policy when requested
5. Attach an invoice number, due date and terms label

The builder only reads the snapshot it is given. Persisting the resulting
invoice, and guaranteeing that no other invoice was saved with the same
number in the meantime, is the caller's job.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from invoice_engine.aggregators.entry_ordering import (
    UNASSIGNED_PROJECT,
    ProjectGroup,
    group_by_project,
    order_priced_entries,
)
from invoice_engine.aggregators.ledger_filter import DateWindow, filter_entries
from invoice_engine.calculators.invoice_numbering import (
    DEFAULT_PREFIX,
    next_invoice_number,
)
from invoice_engine.calculators.rate_resolver import (
    ONE,
    ZERO_QUANTITY,
    PricedEntry,
    annual_media_spend,
    effective_hourly_rate,
    price_entries,
    rate_multiplier,
    unit_rate,
)
from invoice_engine.calculators.terms_calculator import due_date, terms_label
from invoice_engine.calculators.totals_calculator import (
    InvoiceTotals,
    calculate_totals,
    paid_amount_from_entries,
)
from invoice_engine.models.invoice import (
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    PaymentTerms,
)
from invoice_engine.models.ledger import EntryType
from invoice_engine.models.snapshot import LedgerSnapshot
from invoice_engine.utils.logging_utils import LogContext, log_function_call

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceRequest:
    """Caller-chosen options for generating an invoice.

    Attributes:
        client_id: Client to bill (empty for no selection)
        project_id: Single project to bill, or None/"all" for every project
        date_window: Date window of billable entries
        terms: Payment terms
        custom_due_date: Due date for CUSTOM terms
        write_off_excess: Waive excess time covered by a retainer
        paid_amount: Amount already paid; None derives it from entries
            marked as paid
    """

    client_id: str
    project_id: Optional[str] = None
    date_window: DateWindow = field(default_factory=DateWindow)
    terms: PaymentTerms = PaymentTerms.DUE_ON_RECEIPT
    custom_due_date: Optional[dt.date] = None
    write_off_excess: bool = False
    paid_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class InvoicePreview:
    """Everything shown before an invoice is saved.

    Attributes:
        invoice_number: Number the invoice would receive
        client_id: Billed client
        issue_date: Issue date
        due_date: Due date derived from the terms
        terms: Payment terms
        terms_label: Human-readable terms
        entries: Priced entries in presentation order
        line_items: Line items in presentation order
        groups: Entries grouped by project with subtotals
        totals: Totals breakdown
        media_spend_ytd: Year-to-date media spend of each media-spend entry,
            keyed by entry id, for display next to its fees
    """

    invoice_number: str
    client_id: str
    issue_date: dt.date
    due_date: dt.date
    terms: PaymentTerms
    terms_label: str
    entries: Tuple[PricedEntry, ...]
    line_items: Tuple[InvoiceLineItem, ...]
    groups: Tuple[ProjectGroup, ...]
    totals: InvoiceTotals
    media_spend_ytd: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.line_items

    @property
    def diagnostics(self) -> List[str]:
        """Diagnostic messages for line items that needed clamping."""
        return [
            f"{item.original_entry_id}: {', '.join(item.diagnostics)}"
            for item in self.line_items
            if item.diagnostics
        ]


def build_line_item(priced: PricedEntry) -> InvoiceLineItem:
    """Flatten a priced entry into an invoice line item.

    Time entries show hours at the effective rate including the multiplier.
    Other entries show a quantity (one, or the units an expense covers) and
    the unit rate back-computed from the amount.

    Args:
        priced: Priced ledger entry

    Returns:
        InvoiceLineItem snapshot
    """
    entry = priced.entry
    diagnostics = list(priced.resolution.diagnostics)
    project_name = priced.project.name if priced.project else UNASSIGNED_PROJECT

    if entry.type == EntryType.TIME:
        quantity = entry.hours
        rate = effective_hourly_rate(entry, priced.project) * rate_multiplier(entry)
    else:
        quantity = ONE
        if entry.type == EntryType.EXPENSE and entry.quantity is not None:
            quantity = entry.quantity
        rate = unit_rate(priced.amount, quantity)
        if quantity == 0:
            diagnostics.append(ZERO_QUANTITY)

    return InvoiceLineItem(
        description=f"{project_name} - {entry.description}",
        quantity=quantity,
        rate=rate,
        amount=priced.amount,
        type=entry.type,
        original_entry_id=entry.id,
        diagnostics=tuple(diagnostics),
    )


class InvoiceBuilder:
    """Builds invoice previews and invoice snapshots from a ledger snapshot.

    Attributes:
        snapshot: Clients, projects, ledger entries and invoice history
        invoice_prefix: Company invoice number prefix

    Example:
        >>> builder = InvoiceBuilder(snapshot, invoice_prefix="T")
        >>> request = InvoiceRequest(
        ...     client_id="Acme Corp",
        ...     date_window=DateWindow.for_month("2024-05"),
        ...     terms=PaymentTerms.NET_15,
        ... )
        >>> preview = builder.preview(request, now=dt.datetime(2024, 5, 31, 9, 0))
        >>> preview.invoice_number
        'T-ACM-2405-01'
    """

    def __init__(self, snapshot: LedgerSnapshot, invoice_prefix: str = DEFAULT_PREFIX):
        """Initialize the builder.

        Args:
            snapshot: Consistent view of the ledger and invoice history
            invoice_prefix: Company invoice number prefix
        """
        self.snapshot = snapshot
        self.invoice_prefix = invoice_prefix

    def client_name(self, client_id: str) -> str:
        """Display name used for invoice numbering.

        Falls back to the id itself when the client directory has no match,
        since projects may reference clients by name.
        """
        if not client_id:
            return ""
        client = self.snapshot.find_client(client_id)
        return client.name if client else client_id

    def select_entries(self, request: InvoiceRequest) -> List[PricedEntry]:
        """Filter, price and order the entries for a request."""
        selected = filter_entries(
            self.snapshot.entries,
            self.snapshot.projects,
            request.client_id,
            project_id=request.project_id,
            date_window=request.date_window,
        )
        priced = price_entries(selected, self.snapshot.projects)
        return order_priced_entries(priced)

    def media_spend_ytd(self, priced: List[PricedEntry]) -> Dict[str, Decimal]:
        """Running annual spend for each media-spend entry in ``priced``."""
        return {
            p.entry.id: annual_media_spend(p.entry, self.snapshot.entries)
            for p in priced
            if p.entry.type == EntryType.MEDIA_SPEND
        }

    @log_function_call(level="DEBUG")
    def preview(self, request: InvoiceRequest, now: dt.datetime) -> InvoicePreview:
        """Build the preview of an invoice without saving anything.

        Args:
            request: Invoice options
            now: Generation time; sets the issue date and the number period

        Returns:
            InvoicePreview with line items, groups and totals. Without a
            selected client the preview is empty and carries a draft number.
        """
        with LogContext(client_id=request.client_id):
            if request.client_id:
                priced = self.select_entries(request)
            else:
                priced = []

            paid = request.paid_amount
            if paid is None:
                paid = paid_amount_from_entries(priced)
            totals = calculate_totals(priced, paid, request.write_off_excess)

            issue_date = now.date() if isinstance(now, dt.datetime) else now
            preview = InvoicePreview(
                invoice_number=next_invoice_number(
                    self.client_name(request.client_id),
                    self.snapshot.invoices,
                    now,
                    prefix=self.invoice_prefix,
                ),
                client_id=request.client_id,
                issue_date=issue_date,
                due_date=due_date(request.terms, issue_date, request.custom_due_date),
                terms=PaymentTerms(request.terms),
                terms_label=terms_label(request.terms, request.custom_due_date),
                entries=tuple(priced),
                line_items=tuple(build_line_item(p) for p in priced),
                groups=tuple(group_by_project(priced)),
                totals=totals,
                media_spend_ytd=self.media_spend_ytd(priced),
            )

            for message in preview.diagnostics:
                logger.warning(f"Line item needs review: {message}")
            logger.info(
                f"Previewed invoice {preview.invoice_number}: "
                f"{len(preview.line_items)} items, subtotal {totals.subtotal}"
            )
            return preview

    def build(
        self,
        request: InvoiceRequest,
        now: dt.datetime,
        status: InvoiceStatus = InvoiceStatus.SENT,
    ) -> Optional[Invoice]:
        """Build the invoice snapshot to hand to the persistence layer.

        Args:
            request: Invoice options
            now: Generation time
            status: Initial lifecycle status (SENT once issued)

        Returns:
            The Invoice, or None when no client is selected
        """
        if not request.client_id:
            logger.info("No client selected; nothing to build")
            return None

        preview = self.preview(request, now)
        created_at = now if isinstance(now, dt.datetime) else None
        return Invoice(
            invoice_number=preview.invoice_number,
            client_id=request.client_id,
            date=preview.issue_date,
            due_date=preview.due_date,
            terms=preview.terms,
            items=preview.line_items,
            subtotal=preview.totals.subtotal,
            tax=preview.totals.tax,
            total=preview.totals.total,
            status=status,
            created_at=created_at,
        )
