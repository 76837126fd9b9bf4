"""Payment terms calculations.

Maps a payment-terms selection to a due date and a human-readable label,
and measures how overdue an invoice is.
"""

import datetime as dt
import math
from typing import Optional, Union

from invoice_engine.models.invoice import PaymentTerms

_NET_DAYS = {
    PaymentTerms.NET_15: 15,
    PaymentTerms.NET_30: 30,
}

_SECONDS_PER_DAY = 24 * 60 * 60


def due_date(
    terms: PaymentTerms,
    issue_date: dt.date,
    custom_date: Optional[dt.date] = None,
) -> dt.date:
    """Calculate the due date for an invoice.

    Args:
        terms: Selected payment terms
        issue_date: Date the invoice is issued
        custom_date: Caller-supplied due date for CUSTOM terms

    Returns:
        The due date. DUE_ON_RECEIPT, and CUSTOM without a custom date,
        fall back to the issue date.

    Example:
        >>> due_date(PaymentTerms.NET_15, dt.date(2024, 5, 20))
        datetime.date(2024, 6, 4)
    """
    terms = PaymentTerms(terms)
    if terms in _NET_DAYS:
        return issue_date + dt.timedelta(days=_NET_DAYS[terms])
    if terms == PaymentTerms.CUSTOM and custom_date is not None:
        return custom_date
    return issue_date


def terms_label(terms: PaymentTerms, custom_date: Optional[dt.date] = None) -> str:
    """Human-readable label for payment terms.

    Example:
        >>> terms_label(PaymentTerms.NET_30)
        'Net 30'
        >>> terms_label(PaymentTerms.CUSTOM, dt.date(2024, 7, 4))
        'Due by 7/4/2024'
    """
    terms = PaymentTerms(terms)
    if terms == PaymentTerms.NET_15:
        return "Net 15"
    if terms == PaymentTerms.NET_30:
        return "Net 30"
    if terms == PaymentTerms.CUSTOM and custom_date is not None:
        return f"Due by {custom_date.month}/{custom_date.day}/{custom_date.year}"
    return "Due Upon Receipt"


def overdue_days(
    due: dt.date, now: Union[dt.date, dt.datetime]
) -> int:
    """Number of days an invoice is past its due date.

    Partial days round up, so an invoice due yesterday morning is one day
    overdue at any time today. The due date counts from midnight. Paid
    invoices are not excluded here; callers skip them.

    Args:
        due: Invoice due date
        now: Current date or datetime

    Returns:
        Elapsed days since the due date, never negative

    Example:
        >>> overdue_days(dt.date(2024, 5, 10), dt.date(2024, 5, 20))
        10
        >>> overdue_days(dt.date(2024, 5, 21), dt.date(2024, 5, 20))
        0
    """
    if isinstance(now, dt.datetime):
        due_start = dt.datetime.combine(due, dt.time.min, tzinfo=now.tzinfo)
        elapsed = (now - due_start).total_seconds() / _SECONDS_PER_DAY
        days = math.ceil(elapsed)
    else:
        days = (now - due).days
    return max(days, 0)
