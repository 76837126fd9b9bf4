"""Output formatting utilities for CLI."""

from decimal import ROUND_HALF_UP, Decimal
from typing import List

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_money(amount: Decimal) -> str:
    """Format a money amount rounded to cents with thousands separators.

    Args:
        amount: Amount to format

    Returns:
        String such as "$1,320.00" or "-$70.00"

    Example:
        >>> format_money(Decimal("1320"))
        '$1,320.00'
    """
    rounded = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_table(headers: List[str], rows: List[List[str]], max_width: int = 80) -> str:
    """Format data as a table.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 80)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    # Calculate column widths
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    col_widths = [min(w, max_width) for w in col_widths]

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    def format_row(cells) -> str:
        formatted = [
            f" {str(cell)[: col_widths[i]]:<{col_widths[i]}} "
            for i, cell in enumerate(cells)
            if i < len(col_widths)
        ]
        return "|" + "|".join(formatted) + "|"

    table_lines = [separator, format_row(headers), separator]
    if rows:
        table_lines.extend(format_row(row) for row in rows)
        table_lines.append(separator)

    return "\n".join(table_lines)
