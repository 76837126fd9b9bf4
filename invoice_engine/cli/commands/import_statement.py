"""Import statement command."""

import datetime as dt
from pathlib import Path
from typing import Optional

import click

from invoice_engine.cli.error_handlers import DataValidationError, with_error_handling
from invoice_engine.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from invoice_engine.cli.utils.options import (
    parse_amount,
    snapshot_option,
    snapshot_reader,
)
from invoice_engine.config.settings import get_config
from invoice_engine.readers.statement_reader import StatementReader


@click.command(name="import-statement")
@snapshot_option
@click.option(
    "--reply",
    "reply_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Text file holding the statement extraction reply",
)
@click.option("--project", "project_id", required=True, help="Project to charge")
@click.option(
    "--markup",
    "markup_percent",
    default=None,
    help="Markup percent for the imported expenses (default from config)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show the parsed transactions without saving them",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def import_statement(
    snapshot_path: Optional[str],
    reply_path: str,
    project_id: str,
    markup_percent: Optional[str],
    dry_run: bool,
    debug: bool,
):
    """Import card statement transactions as expense entries.

    The reply is the text returned by the statement extraction service: a
    JSON array of {date, description, amount} objects, possibly wrapped in
    prose. Each valid row becomes a PENDING expense on the given project.

    Example:
        invoice-cli import-statement --reply reply.txt --project p1
        invoice-cli import-statement --reply reply.txt --project p1 --markup 15
    """
    with with_error_handling(debug):
        markup = parse_amount(markup_percent, "--markup")
        if markup is None:
            markup = get_config().default_markup_percent
        if markup < 0:
            raise DataValidationError("--markup cannot be negative")

        reader = snapshot_reader(snapshot_path)
        snapshot = reader.read()
        if project_id not in snapshot.project_index():
            raise DataValidationError(
                f"Unknown project: {project_id}",
                recovery_hint="Use a project id from the snapshot",
            )

        statement = StatementReader(markup_percent=markup)
        try:
            candidates = statement.parse_response(
                Path(reply_path).read_text(encoding="utf-8")
            )
        except ValueError as e:
            raise DataValidationError(str(e))

        if not candidates:
            click.echo(format_info("No transactions found in the reply."))
            return

        rows = [
            [c.date.isoformat(), c.description, format_money(c.amount)]
            for c in candidates
        ]
        click.echo(format_table(["Date", "Description", "Amount"], rows))
        click.echo()

        if dry_run:
            click.echo(format_info(f"Dry run: {len(candidates)} transaction(s) parsed"))
            return

        entries = statement.to_expense_entries(
            candidates, project_id, created_at=dt.datetime.now()
        )
        updated = snapshot.model_copy(
            update={"entries": [*snapshot.entries, *entries]}
        )
        reader.write(updated)
        click.echo(
            format_success(
                f"Imported {len(entries)} expense(s) into project {project_id}"
            )
        )
