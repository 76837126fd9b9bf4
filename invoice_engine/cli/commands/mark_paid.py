"""Mark invoice paid command."""

from typing import Optional

import click

from invoice_engine.cli.error_handlers import (
    DataValidationError,
    ProcessingError,
    with_error_handling,
)
from invoice_engine.cli.utils.formatters import format_info, format_success
from invoice_engine.cli.utils.options import snapshot_option, snapshot_reader
from invoice_engine.models.invoice import InvoiceStatus


@click.command(name="mark-paid")
@snapshot_option
@click.option(
    "--invoice",
    "invoice_ref",
    required=True,
    help="Invoice number (or stored invoice id) to mark as paid",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def mark_paid(snapshot_path: Optional[str], invoice_ref: str, debug: bool):
    """Record that an invoice has been paid.

    Only the status changes; the invoice keeps its number, items and totals.
    Paid invoices no longer appear in list-invoices.

    Example:
        invoice-cli mark-paid --invoice T-ACM-2405-01
    """
    with with_error_handling(debug):
        reader = snapshot_reader(snapshot_path)
        snapshot = reader.read()

        matches = [
            i
            for i, inv in enumerate(snapshot.invoices)
            if invoice_ref in (inv.invoice_number, inv.id)
        ]
        if not matches:
            raise DataValidationError(
                f"Unknown invoice: {invoice_ref}",
                recovery_hint="Run list-invoices to see open invoice numbers",
            )
        if len(matches) > 1:
            raise ProcessingError(
                f"Invoice number {invoice_ref} is used by {len(matches)} invoices",
                recovery_hint="Pass the stored invoice id instead of the number",
            )

        index = matches[0]
        invoice = snapshot.invoices[index]
        if invoice.status == InvoiceStatus.PAID:
            click.echo(format_info(f"Invoice {invoice.invoice_number} is already paid"))
            return

        invoices = list(snapshot.invoices)
        invoices[index] = invoice.with_status(InvoiceStatus.PAID)
        reader.write(snapshot.model_copy(update={"invoices": invoices}))
        click.echo(format_success(f"Invoice {invoice.invoice_number} marked as paid"))
