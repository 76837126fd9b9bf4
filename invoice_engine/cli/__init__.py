"""Invoice Engine CLI.

This module provides a command-line interface for the invoice engine.
It includes commands for previewing and generating invoices, listing open
invoices, marking invoices paid, validating the ledger, importing card
statements and summarizing revenue.
"""

from typing import Optional

import click
from pydantic import ValidationError

from invoice_engine import __version__
from invoice_engine.cli.commands.generate import generate_invoice
from invoice_engine.cli.commands.import_statement import import_statement
from invoice_engine.cli.commands.list import list_invoices
from invoice_engine.cli.commands.mark_paid import mark_paid
from invoice_engine.cli.commands.preview import preview_invoice
from invoice_engine.cli.commands.summary import revenue_summary
from invoice_engine.cli.commands.validate import validate_ledger
from invoice_engine.cli.error_handlers import ConfigurationError, with_error_handling
from invoice_engine.config.logging_config import LoggingConfig, configure_logging
from invoice_engine.config.settings import get_config
from invoice_engine.utils.logging_utils import LogContext, generate_correlation_id


@click.group(help="Invoice Engine CLI - Price ledger entries and generate invoices")
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Override LOG_LEVEL from the configuration",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    """Invoice Engine CLI main entry point."""
    with with_error_handling():
        try:
            settings = get_config()
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.error_count()} error(s)\n{e}",
                recovery_hint="Check the values in your .env file",
            )
        level = (log_level or settings.log_level).upper()
        configure_logging(LoggingConfig.from_env(log_level=level))
    ctx.with_resource(LogContext(correlation_id=generate_correlation_id()))


# Register commands
cli.add_command(preview_invoice)
cli.add_command(generate_invoice)
cli.add_command(list_invoices)
cli.add_command(mark_paid)
cli.add_command(validate_ledger)
cli.add_command(import_statement)
cli.add_command(revenue_summary)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
