"""Aggregators that turn a ledger into invoices and summaries.

This package filters the ledger, orders and groups priced entries, assembles
invoices, and summarizes revenue.
"""

from invoice_engine.aggregators.entry_ordering import (
    ProjectGroup,
    entry_weight,
    group_by_project,
    order_entries,
    order_priced_entries,
)
from invoice_engine.aggregators.invoice_builder import (
    InvoiceBuilder,
    InvoicePreview,
    InvoiceRequest,
    build_line_item,
)
from invoice_engine.aggregators.ledger_filter import (
    DateFilterType,
    DateWindow,
    filter_entries,
)
from invoice_engine.aggregators.revenue_summary import RevenueSummary, summarize_revenue

__all__ = [
    "ProjectGroup",
    "entry_weight",
    "group_by_project",
    "order_entries",
    "order_priced_entries",
    "InvoiceBuilder",
    "InvoicePreview",
    "InvoiceRequest",
    "build_line_item",
    "DateFilterType",
    "DateWindow",
    "filter_entries",
    "RevenueSummary",
    "summarize_revenue",
]
