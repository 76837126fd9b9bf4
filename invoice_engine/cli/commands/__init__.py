"""CLI commands."""

from invoice_engine.cli.commands.generate import generate_invoice
from invoice_engine.cli.commands.import_statement import import_statement
from invoice_engine.cli.commands.list import list_invoices
from invoice_engine.cli.commands.mark_paid import mark_paid
from invoice_engine.cli.commands.preview import preview_invoice
from invoice_engine.cli.commands.summary import revenue_summary
from invoice_engine.cli.commands.validate import validate_ledger

__all__ = [
    "generate_invoice",
    "import_statement",
    "list_invoices",
    "mark_paid",
    "preview_invoice",
    "revenue_summary",
    "validate_ledger",
]
