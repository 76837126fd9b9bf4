"""Invoice number generation.

Invoice numbers have the form ``{prefix}-{CLIENT}-{YYMM}-{SEQ}``, for
example ``T-ACM-2405-01``:
- prefix: company invoice prefix from configuration
- CLIENT: first three letters of the client name, uppercased
- YYMM: two-digit year and month of generation
- SEQ: one more than the number of existing invoices sharing the prefix

Generation is deterministic and has no counter service behind it. Two
invoices generated for the same client and month without seeing each
other's saved record get the same number; callers must serialize
generation or detect the collision when persisting.
"""

import datetime as dt
import re
from typing import Iterable, Optional, Union

from invoice_engine.models.invoice import Invoice

DEFAULT_PREFIX = "T"
DRAFT_SUFFIX = "DRAFT"

_NON_LETTERS = re.compile(r"[^a-zA-Z]")


def client_code(client_name: str) -> str:
    """Derive the three-letter client code from a client name.

    Non-letters are stripped before truncation. Names with fewer than three
    letters give a shorter code, and names without letters an empty one.

    Args:
        client_name: Client display name

    Returns:
        Uppercased code of at most three letters

    Example:
        >>> client_code("Acme Corp")
        'ACM'
        >>> client_code("3M")
        'M'
    """
    return _NON_LETTERS.sub("", client_name)[:3].upper()


def period_code(now: Union[dt.date, dt.datetime]) -> str:
    """Two-digit year followed by the zero-padded month.

    Example:
        >>> period_code(dt.date(2024, 5, 20))
        '2405'
    """
    return f"{now.year % 100:02d}{now.month:02d}"


def invoice_number_prefix(
    client_name: str, now: Union[dt.date, dt.datetime], prefix: str = DEFAULT_PREFIX
) -> str:
    """Build the ``{prefix}-{CLIENT}-{YYMM}`` part of an invoice number."""
    return f"{prefix}-{client_code(client_name)}-{period_code(now)}"


def next_invoice_number(
    client_name: Optional[str],
    existing_invoices: Iterable[Invoice],
    now: Union[dt.date, dt.datetime],
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """Compute the number for the next invoice of a client.

    Args:
        client_name: Client display name; empty or None yields a draft
            placeholder
        existing_invoices: Invoice history visible to the caller
        now: Generation date
        prefix: Company invoice prefix

    Returns:
        The next invoice number, or ``{prefix}-DRAFT`` without a client

    Example:
        >>> next_invoice_number("Acme Corp", [], dt.date(2024, 5, 20))
        'T-ACM-2405-01'
        >>> next_invoice_number("", [], dt.date(2024, 5, 20))
        'T-DRAFT'
    """
    if not client_name:
        return f"{prefix}-{DRAFT_SUFFIX}"

    number_prefix = invoice_number_prefix(client_name, now, prefix)
    count = sum(
        1
        for invoice in existing_invoices
        if invoice.invoice_number and invoice.invoice_number.startswith(number_prefix)
    )
    return f"{number_prefix}-{count + 1:02d}"
