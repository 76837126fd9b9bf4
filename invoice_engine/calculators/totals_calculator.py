"""Invoice totals and write-off calculations.

This module aggregates resolved amounts into invoice totals:
- time_total: sum of TIME entry amounts
- expense_total: sum of every other entry amount (expenses, fixed fees
  and media fees are rolled up together)
- subtotal = time_total + expense_total; tax is always zero
- balance_due = subtotal - paid_amount - discount

Write-off policy (only when ``write_off_excess`` is set): a payment already
received, such as a retainer, is assumed to cover time first, while
non-time charges always stay due. Whatever part of the outstanding balance
exceeds the expense total is waived as a discount. This is a business
policy, not an accounting identity: nothing records which part of a payment
went to which entry type.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from invoice_engine.calculators.rate_resolver import ZERO, PricedEntry
from invoice_engine.models.ledger import EntryType, PaymentStatus


@dataclass(frozen=True)
class InvoiceTotals:
    """Totals breakdown of an invoice.

    Attributes:
        time_total: Sum of time entry amounts
        expense_total: Sum of all non-time entry amounts
        subtotal: time_total + expense_total
        tax: Always zero
        total: subtotal + tax
        paid_amount: Amount already paid (e.g. retainer)
        discount: Write-off of excess time, zero unless the policy is on
        balance_due: subtotal - paid_amount - discount

    Example:
        >>> totals = InvoiceTotals(
        ...     time_total=Decimal("1200"),
        ...     expense_total=Decimal("120"),
        ...     subtotal=Decimal("1320"),
        ...     tax=Decimal("0"),
        ...     total=Decimal("1320"),
        ...     paid_amount=Decimal("0"),
        ...     discount=Decimal("0"),
        ...     balance_due=Decimal("1320"),
        ... )
        >>> totals.balance_due
        Decimal('1320')
    """

    time_total: Decimal
    expense_total: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    paid_amount: Decimal
    discount: Decimal
    balance_due: Decimal


def paid_amount_from_entries(priced_entries: Iterable[PricedEntry]) -> Decimal:
    """Sum the resolved amounts of entries marked as paid.

    Args:
        priced_entries: Priced ledger entries

    Returns:
        Total amount of entries whose payment status is PAID
    """
    return sum(
        (p.amount for p in priced_entries if p.entry.status == PaymentStatus.PAID),
        ZERO,
    )


def calculate_totals(
    priced_entries: Iterable[PricedEntry],
    paid_amount: Optional[Decimal] = None,
    write_off_excess: bool = False,
) -> InvoiceTotals:
    """Aggregate priced entries into invoice totals.

    Args:
        priced_entries: Priced ledger entries on the invoice
        paid_amount: Amount already paid; None means zero
        write_off_excess: Waive outstanding balance above the expense total

    Returns:
        InvoiceTotals breakdown

    Example:
        >>> totals = calculate_totals(priced, Decimal("1250"), write_off_excess=True)
        >>> totals.discount, totals.balance_due
        (Decimal('0'), Decimal('70'))
    """
    time_total = ZERO
    expense_total = ZERO
    for priced in priced_entries:
        if priced.entry.type == EntryType.TIME:
            time_total += priced.amount
        else:
            expense_total += priced.amount

    paid = paid_amount if paid_amount is not None else ZERO
    subtotal = time_total + expense_total
    tax = ZERO
    total = subtotal + tax

    discount = ZERO
    if write_off_excess:
        current_balance = subtotal - paid
        discount = max(ZERO, current_balance - expense_total)

    return InvoiceTotals(
        time_total=time_total,
        expense_total=expense_total,
        subtotal=subtotal,
        tax=tax,
        total=total,
        paid_amount=paid,
        discount=discount,
        balance_due=subtotal - paid - discount,
    )
