"""List invoices command."""

from typing import Optional

import click

from invoice_engine.calculators.terms_calculator import overdue_days
from invoice_engine.cli.commands.preview import resolve_now
from invoice_engine.cli.error_handlers import with_error_handling
from invoice_engine.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from invoice_engine.cli.utils.options import snapshot_option, snapshot_reader
from invoice_engine.models.invoice import InvoiceStatus


@click.command(name="list-invoices")
@snapshot_option
@click.option("--client", "client_id", default=None, help="Only list this client")
@click.option(
    "--as-of",
    type=str,
    default=None,
    help="Reference date for overdue days (YYYY-MM-DD, default: now)",
)
@click.option(
    "--overdue-only",
    is_flag=True,
    default=False,
    help="Only list invoices past their due date",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def list_invoices(
    snapshot_path: Optional[str],
    client_id: Optional[str],
    as_of: Optional[str],
    overdue_only: bool,
    debug: bool,
):
    """List open invoices with the number of days they are overdue.

    Paid invoices are not listed.

    Example:
        invoice-cli list-invoices
        invoice-cli list-invoices --client c1 --overdue-only
    """
    with with_error_handling(debug):
        now = resolve_now(as_of)
        snapshot = snapshot_reader(snapshot_path).read()

        rows = []
        for invoice in sorted(
            snapshot.invoices, key=lambda inv: (inv.due_date, inv.invoice_number)
        ):
            if invoice.status == InvoiceStatus.PAID:
                continue
            if client_id and invoice.client_id != client_id:
                continue
            days = overdue_days(invoice.due_date, now)
            if overdue_only and days == 0:
                continue
            rows.append(
                [
                    invoice.invoice_number,
                    invoice.client_id,
                    invoice.date.isoformat(),
                    invoice.due_date.isoformat(),
                    invoice.status.value,
                    format_money(invoice.total),
                    str(days) if days else "-",
                ]
            )

        if not rows:
            click.echo(format_info("No open invoices found."))
            return

        headers = ["Invoice", "Client", "Issued", "Due", "Status", "Total", "Overdue"]
        click.echo(format_table(headers, rows))
        click.echo()
        click.echo(format_success(f"Found {len(rows)} open invoice(s)"))
