"""Validate ledger command."""

import sys
from typing import Optional

import click

from invoice_engine.cli.error_handlers import with_error_handling
from invoice_engine.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from invoice_engine.cli.utils.options import snapshot_option, snapshot_reader
from invoice_engine.validators.validation_report import ValidationSeverity
from invoice_engine.validators.validator import LedgerValidator


@click.command(name="validate-ledger")
@snapshot_option
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="error",
    help="Minimum severity level to display (default: error)",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def validate_ledger(snapshot_path: Optional[str], severity: str, debug: bool):
    """Validate ledger entries and invoice history.

    Checks for:
    - Negative hours, costs and spend
    - Entries referencing unknown projects
    - Duplicate invoice numbers
    - Entries billed on more than one invoice

    Returns non-zero exit code if errors are found.

    Example:
        invoice-cli validate-ledger
        invoice-cli validate-ledger --severity warning
    """
    with with_error_handling(debug):
        click.echo(format_info("Validating ledger snapshot..."))
        severity_level = ValidationSeverity[severity.upper()]

        snapshot = snapshot_reader(snapshot_path).read()
        report = LedgerValidator.validate_snapshot(snapshot)

        click.echo()
        if report.get_issues(severity_level):
            click.echo(report.format(severity_level))
            click.echo()

        if report.has_errors():
            click.echo(format_error(f"Validation failed: {report.summary()}"))
            sys.exit(1)
        elif report.warning_count:
            click.echo(format_warning(f"Validation passed with {report.summary()}"))
        else:
            click.echo(format_success("Validation passed"))
