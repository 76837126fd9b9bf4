"""Generate invoice command."""

import time
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from invoice_engine.aggregators.invoice_builder import InvoiceBuilder
from invoice_engine.cli.commands.preview import render_preview, resolve_now
from invoice_engine.cli.error_handlers import ProcessingError, with_error_handling
from invoice_engine.cli.utils.formatters import format_info, format_success
from invoice_engine.cli.utils.options import (
    build_date_window,
    build_invoice_request,
    date_window_options,
    invoice_request_options,
    resolve_client_key,
    snapshot_option,
    snapshot_reader,
)
from invoice_engine.config.settings import get_config
from invoice_engine.writers.invoice_writer import InvoiceWriter


@click.command(name="generate-invoice")
@snapshot_option
@invoice_request_options
@date_window_options
@click.option(
    "--issue-date",
    type=str,
    default=None,
    help="Issue date (YYYY-MM-DD, default: today)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the invoice files (optional, uses default from config)",
)
@click.option(
    "--no-save",
    is_flag=True,
    default=False,
    help="Write the invoice files without adding the invoice to the snapshot",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def generate_invoice(
    snapshot_path: Optional[str],
    client_id: str,
    project_id: Optional[str],
    terms: Optional[str],
    custom_due_date: Optional[str],
    write_off_excess: bool,
    paid_amount: Optional[str],
    month: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    issue_date: Optional[str],
    output_dir: Optional[str],
    no_save: bool,
    debug: bool,
):
    """Generate an invoice and record it in the invoice history.

    This command runs the full pipeline:
    1. Read the ledger snapshot
    2. Filter, price and order the client's entries
    3. Number the invoice and compute due date and totals
    4. Write the invoice as JSON plus a CSV of line items
    5. Append the invoice (status SENT) to the snapshot

    Example:
        invoice-cli generate-invoice --client "Acme Corp" --month 2024-05
        invoice-cli generate-invoice --client c1 --terms CUSTOM --due-date 2024-07-01
    """
    start_time = time.time()

    with with_error_handling(debug):
        settings = get_config()
        request = build_invoice_request(
            client_id,
            project_id,
            terms,
            custom_due_date,
            write_off_excess,
            paid_amount,
            build_date_window(month, start_date, end_date),
        )
        now = resolve_now(issue_date)

        reader = snapshot_reader(snapshot_path)
        snapshot = reader.read()
        request = replace(request, client_id=resolve_client_key(snapshot, client_id))
        builder = InvoiceBuilder(snapshot, invoice_prefix=settings.invoice_prefix)

        preview = builder.preview(request, now)
        if preview.is_empty:
            click.echo(format_info("No billable entries for the selected filters."))
            return

        invoice = builder.build(request, now)
        clash = next(
            (
                inv
                for inv in snapshot.invoices
                if inv.invoice_number == invoice.invoice_number
            ),
            None,
        )
        if clash is not None:
            raise ProcessingError(
                f"Invoice number {invoice.invoice_number} already exists",
                recovery_hint=(
                    f"It belongs to the invoice issued {clash.date.isoformat()} "
                    f"for client {clash.client_id} (status {clash.status.value}). "
                    "Renumber or remove that invoice in the snapshot, then "
                    "generate again"
                ),
            )

        render_preview(preview)
        click.echo()

        writer = InvoiceWriter(Path(output_dir or settings.output_dir))
        json_path, csv_path = writer.write(invoice)
        click.echo(format_success(f"Invoice written to {json_path}"))
        click.echo(format_success(f"Line items written to {csv_path}"))

        if no_save:
            click.echo(format_info("Snapshot left unchanged (--no-save)"))
        else:
            updated = snapshot.model_copy(
                update={"invoices": [*snapshot.invoices, invoice]}
            )
            reader.write(updated)
            click.echo(format_success(f"Invoice recorded in {reader.path}"))

        elapsed = time.time() - start_time
        click.echo(format_info(f"Completed in {elapsed:.1f}s"))
