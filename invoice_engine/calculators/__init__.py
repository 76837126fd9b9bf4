"""Calculator modules for the invoice engine."""

from invoice_engine.calculators.invoice_numbering import (
    client_code,
    invoice_number_prefix,
    next_invoice_number,
    period_code,
)
from invoice_engine.calculators.rate_resolver import (
    MediaFeeBreakdown,
    PricedEntry,
    ResolvedAmount,
    annual_media_spend,
    calculate_media_fees,
    price_entries,
    resolve,
    unit_rate,
)
from invoice_engine.calculators.terms_calculator import (
    due_date,
    overdue_days,
    terms_label,
)
from invoice_engine.calculators.totals_calculator import (
    InvoiceTotals,
    calculate_totals,
    paid_amount_from_entries,
)

__all__ = [
    # invoice_numbering
    "client_code",
    "invoice_number_prefix",
    "next_invoice_number",
    "period_code",
    # rate_resolver
    "MediaFeeBreakdown",
    "PricedEntry",
    "ResolvedAmount",
    "annual_media_spend",
    "calculate_media_fees",
    "price_entries",
    "resolve",
    "unit_rate",
    # terms_calculator
    "due_date",
    "overdue_days",
    "terms_label",
    # totals_calculator
    "InvoiceTotals",
    "calculate_totals",
    "paid_amount_from_entries",
]
