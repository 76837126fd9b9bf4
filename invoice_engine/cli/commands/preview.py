"""Preview invoice command."""

import datetime as dt
from dataclasses import replace
from typing import Optional

import click

from invoice_engine.aggregators.invoice_builder import InvoiceBuilder, InvoicePreview
from invoice_engine.cli.error_handlers import with_error_handling
from invoice_engine.cli.utils.formatters import (
    format_info,
    format_money,
    format_table,
    format_warning,
)
from invoice_engine.cli.utils.options import (
    build_date_window,
    build_invoice_request,
    date_window_options,
    invoice_request_options,
    parse_date,
    resolve_client_key,
    snapshot_option,
    snapshot_reader,
)
from invoice_engine.config.settings import get_config


def resolve_now(issue_date: Optional[str]) -> dt.datetime:
    """Generation time: the given issue date at midnight, or the current time."""
    if issue_date:
        return dt.datetime.combine(parse_date(issue_date, "--issue-date"), dt.time())
    return dt.datetime.now()


def render_preview(preview: InvoicePreview) -> None:
    """Print a preview: header, line items per project, then totals."""
    click.echo(f"Invoice:  {preview.invoice_number}")
    click.echo(f"Client:   {preview.client_id}")
    click.echo(f"Issued:   {preview.issue_date.isoformat()}")
    click.echo(f"Due:      {preview.due_date.isoformat()} ({preview.terms_label})")
    click.echo()

    items = {item.original_entry_id: item for item in preview.line_items}
    headers = ["Date", "Description", "Qty", "Rate", "Amount"]
    for group in preview.groups:
        click.echo(f"{group.project_name}  [{format_money(group.subtotal)}]")
        rows = []
        for priced in group.entries:
            item = items[priced.entry.id]
            rows.append(
                [
                    priced.entry.date.isoformat(),
                    item.description,
                    str(item.quantity.normalize()),
                    format_money(item.rate),
                    format_money(item.amount),
                ]
            )
        click.echo(format_table(headers, rows))
        for priced in group.entries:
            spend = preview.media_spend_ytd.get(priced.entry.id)
            if spend is not None:
                click.echo(
                    f"  {priced.entry.date.year} media spend "
                    f"({priced.entry.description or priced.entry.id}): "
                    f"{format_money(spend)}"
                )
        click.echo()

    totals = preview.totals
    click.echo(f"Subtotal:     {format_money(totals.subtotal)}")
    if totals.paid_amount:
        click.echo(f"Paid:         -{format_money(totals.paid_amount)}")
    if totals.discount:
        click.echo(f"Write-off:    -{format_money(totals.discount)}")
    click.echo(f"Total:        {format_money(totals.total)}")
    click.echo(f"Balance due:  {format_money(totals.balance_due)}")

    for message in preview.diagnostics:
        click.echo(format_warning(f"Review: {message}"))


@click.command(name="preview-invoice")
@snapshot_option
@invoice_request_options
@date_window_options
@click.option(
    "--issue-date",
    type=str,
    default=None,
    help="Issue date (YYYY-MM-DD, default: today)",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def preview_invoice(
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
    debug: bool,
):
    """Show the invoice that would be generated, without saving anything.

    Example:
        invoice-cli preview-invoice --client "Acme Corp" --month 2024-05
        invoice-cli preview-invoice --client c1 --terms NET_15 --write-off
    """
    with with_error_handling(debug):
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
        snapshot = snapshot_reader(snapshot_path).read()
        request = replace(request, client_id=resolve_client_key(snapshot, client_id))

        builder = InvoiceBuilder(snapshot, invoice_prefix=get_config().invoice_prefix)
        preview = builder.preview(request, now)

        if preview.is_empty:
            click.echo(format_info("No billable entries for the selected filters."))
            return

        render_preview(preview)
