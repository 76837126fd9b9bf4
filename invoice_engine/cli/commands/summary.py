"""Revenue summary command."""

from typing import Optional

import click

from invoice_engine.aggregators.revenue_summary import summarize_revenue
from invoice_engine.cli.error_handlers import with_error_handling
from invoice_engine.cli.utils.formatters import (
    format_info,
    format_money,
    format_success,
    format_table,
)
from invoice_engine.cli.utils.options import (
    build_date_window,
    date_window_options,
    snapshot_option,
    snapshot_reader,
)


@click.command(name="revenue-summary")
@snapshot_option
@date_window_options
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write the per-project table to this CSV file",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def revenue_summary(
    snapshot_path: Optional[str],
    month: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    csv_path: Optional[str],
    debug: bool,
):
    """Summarize revenue, hours and profit per project.

    Example:
        invoice-cli revenue-summary
        invoice-cli revenue-summary --month 2024-05 --csv revenue.csv
    """
    with with_error_handling(debug):
        window = build_date_window(month, start_date, end_date)
        snapshot = snapshot_reader(snapshot_path).read()
        entries = [e for e in snapshot.entries if window.contains(e.date)]

        summary = summarize_revenue(entries, snapshot.projects)
        if summary.by_project.empty:
            click.echo(format_info("No ledger entries in the selected period."))
            return

        rows = [
            [
                row.project,
                row.client,
                str(row.hours.normalize()),
                format_money(row.revenue),
                format_money(row.profit),
            ]
            for row in summary.by_project.itertuples(index=False)
        ]
        headers = ["Project", "Client", "Hours", "Revenue", "Profit"]
        click.echo(format_table(headers, rows))
        click.echo()
        click.echo(f"Total revenue:    {format_money(summary.total_revenue)}")
        click.echo(f"Total hours:      {summary.total_hours.normalize()}")
        click.echo(f"Tracked profit:   {format_money(summary.total_profit)}")
        click.echo(f"Active projects:  {summary.active_projects}")

        if csv_path:
            summary.by_project.to_csv(csv_path, index=False)
            click.echo()
            click.echo(format_success(f"Summary written to {csv_path}"))
