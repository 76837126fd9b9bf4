"""Shared option handling for CLI commands."""

import datetime as dt
import functools
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

import click

from invoice_engine.aggregators.invoice_builder import InvoiceRequest
from invoice_engine.aggregators.ledger_filter import DateWindow
from invoice_engine.cli.error_handlers import DataValidationError
from invoice_engine.config.settings import get_config
from invoice_engine.models.invoice import PaymentTerms
from invoice_engine.models.snapshot import LedgerSnapshot
from invoice_engine.readers.snapshot_reader import SnapshotReader


def snapshot_option(f: Callable) -> Callable:
    """Add the --snapshot option (defaults to LEDGER_SNAPSHOT_FILE)."""
    return click.option(
        "--snapshot",
        "snapshot_path",
        type=click.Path(dir_okay=False),
        default=None,
        help="Ledger snapshot JSON file (optional, uses default from config)",
    )(f)


def date_window_options(f: Callable) -> Callable:
    """Add --month and --start-date/--end-date options."""
    options = [
        click.option(
            "--month",
            type=str,
            default=None,
            help="Bill a single month (YYYY-MM). Cannot be used with a date range.",
        ),
        click.option(
            "--start-date",
            type=str,
            default=None,
            help="Inclusive range start (YYYY-MM-DD). Requires --end-date.",
        ),
        click.option(
            "--end-date",
            type=str,
            default=None,
            help="Inclusive range end (YYYY-MM-DD). Requires --start-date.",
        ),
    ]
    return functools.reduce(lambda acc, option: option(acc), reversed(options), f)


def parse_date(value: str, option_name: str) -> dt.date:
    """Parse a YYYY-MM-DD option value.

    Raises:
        DataValidationError: If the value is not an ISO date
    """
    try:
        return dt.datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise DataValidationError(
            f"Invalid date for {option_name}: {value}",
            recovery_hint="Use the YYYY-MM-DD format",
        )


def parse_amount(value: Optional[str], option_name: str) -> Optional[Decimal]:
    """Parse a money option value into a Decimal.

    Raises:
        DataValidationError: If the value is not a finite number
    """
    if value is None:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite():
        raise DataValidationError(f"Invalid amount for {option_name}: {value}")
    return amount


def build_date_window(
    month: Optional[str], start_date: Optional[str], end_date: Optional[str]
) -> DateWindow:
    """Turn the date options into a DateWindow.

    Raises:
        DataValidationError: If options are combined incorrectly or malformed
    """
    if month and (start_date or end_date):
        raise DataValidationError(
            "Cannot use --month together with --start-date/--end-date"
        )
    if (start_date is None) != (end_date is None):
        raise DataValidationError("--start-date and --end-date must be used together")

    if month:
        try:
            dt.datetime.strptime(month, "%Y-%m")
        except ValueError:
            raise DataValidationError(
                f"Invalid month format: {month}", recovery_hint="Use YYYY-MM"
            )
        return DateWindow.for_month(month)

    if start_date and end_date:
        start = parse_date(start_date, "--start-date")
        end = parse_date(end_date, "--end-date")
        if start > end:
            raise DataValidationError("--start-date must not be after --end-date")
        return DateWindow.between(start, end)

    return DateWindow.all()


def snapshot_reader(snapshot_path: Optional[str]) -> SnapshotReader:
    """Reader for the given snapshot path, or the configured default."""
    return SnapshotReader(snapshot_path or get_config().ledger_snapshot_file)


def invoice_request_options(f: Callable) -> Callable:
    """Add the options that describe an invoice request."""
    options = [
        click.option("--client", "client_id", required=True, help="Client to bill"),
        click.option(
            "--project",
            "project_id",
            default=None,
            help="Bill a single project (default: all projects of the client)",
        ),
        click.option(
            "--terms",
            type=click.Choice([t.value for t in PaymentTerms], case_sensitive=False),
            default=None,
            help="Payment terms (default: DEFAULT_PAYMENT_TERMS from config)",
        ),
        click.option(
            "--due-date",
            "custom_due_date",
            default=None,
            help="Due date for CUSTOM terms (YYYY-MM-DD)",
        ),
        click.option(
            "--write-off",
            "write_off_excess",
            is_flag=True,
            default=False,
            help="Write off excess time covered by the retainer",
        ),
        click.option(
            "--paid",
            "paid_amount",
            default=None,
            help="Amount already paid (default: sum of entries marked PAID)",
        ),
    ]
    return functools.reduce(lambda acc, option: option(acc), reversed(options), f)


def build_invoice_request(
    client_id: str,
    project_id: Optional[str],
    terms: Optional[str],
    custom_due_date: Optional[str],
    write_off_excess: bool,
    paid_amount: Optional[str],
    date_window: DateWindow,
) -> InvoiceRequest:
    """Turn invoice options into an InvoiceRequest.

    Raises:
        DataValidationError: If an option value is malformed
    """
    selected_terms = (
        PaymentTerms(terms.upper()) if terms else get_config().default_payment_terms
    )
    due = parse_date(custom_due_date, "--due-date") if custom_due_date else None
    if due is not None and selected_terms != PaymentTerms.CUSTOM:
        raise DataValidationError("--due-date can only be used with --terms CUSTOM")

    return InvoiceRequest(
        client_id=client_id,
        project_id=project_id,
        date_window=date_window,
        terms=selected_terms,
        custom_due_date=due,
        write_off_excess=write_off_excess,
        paid_amount=parse_amount(paid_amount, "--paid"),
    )


def resolve_client_key(snapshot: LedgerSnapshot, client: str) -> str:
    """Map a --client value to the key projects use for their owner.

    Projects reference their client by id or, in older documents, by name.
    The value is kept when a project uses it. Otherwise the directory match
    by id or name gives the client's name when projects are keyed by name,
    and its id when they are not.

    Raises:
        DataValidationError: If no project or client matches
    """
    if any(p.client_id == client for p in snapshot.projects):
        return client
    match = snapshot.find_client(client)
    if match is None:
        raise DataValidationError(
            f"Unknown client: {client}",
            recovery_hint="Use a client id or name from the snapshot",
        )
    if any(p.client_id == match.name for p in snapshot.projects):
        return match.name
    return match.id
