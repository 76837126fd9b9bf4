"""Unit tests for invoice totals and the write-off policy.

Covers the Acme scenarios: 8h at $150 plus a $100 expense at 20% markup,
with and without a prior payment and the write-off flag.
"""

import datetime as dt
from decimal import Decimal

import pytest

from invoice_engine.calculators.rate_resolver import ZERO, price_entries
from invoice_engine.calculators.totals_calculator import (
    calculate_totals,
    paid_amount_from_entries,
)
from invoice_engine.models import FixedFeeEntry, PaymentStatus


@pytest.fixture
def acme_priced(acme_project, time_entry, expense_entry):
    return price_entries([time_entry, expense_entry], [acme_project])


class TestCalculateTotals:
    """Test totals aggregation."""

    def test_acme_without_payment(self, acme_priced):
        """Test subtotal and balance with nothing paid."""
        totals = calculate_totals(acme_priced)

        assert totals.time_total == Decimal("1200")
        assert totals.expense_total == Decimal("120")
        assert totals.subtotal == Decimal("1320")
        assert totals.tax == ZERO
        assert totals.total == Decimal("1320")
        assert totals.paid_amount == ZERO
        assert totals.discount == ZERO
        assert totals.balance_due == Decimal("1320")

    def test_acme_retainer_with_write_off(self, acme_priced):
        """Test a $1,250 payment with the write-off flag set."""
        totals = calculate_totals(acme_priced, Decimal("1250"), write_off_excess=True)

        assert totals.discount == ZERO
        assert totals.balance_due == Decimal("70")

    def test_acme_write_off_without_payment(self, acme_priced):
        """Test that excess time is waived down to the expense total."""
        totals = calculate_totals(acme_priced, ZERO, write_off_excess=True)

        assert totals.discount == Decimal("1200")
        assert totals.balance_due == Decimal("120")

    def test_write_off_off_ignores_excess(self, acme_priced):
        totals = calculate_totals(acme_priced, ZERO, write_off_excess=False)
        assert totals.discount == ZERO
        assert totals.balance_due == Decimal("1320")

    def test_overpayment_gives_negative_balance(self, acme_priced):
        """Test that the balance is not clamped at zero."""
        totals = calculate_totals(acme_priced, Decimal("1500"))
        assert totals.balance_due == Decimal("-180")

    @pytest.mark.parametrize("paid", ["0", "100", "1320", "2000"])
    @pytest.mark.parametrize("write_off", [True, False])
    def test_identities(self, acme_priced, paid, write_off):
        """Test subtotal and balance identities for any payment."""
        totals = calculate_totals(acme_priced, Decimal(paid), write_off)

        assert totals.subtotal == totals.time_total + totals.expense_total
        assert totals.total == totals.subtotal + totals.tax
        assert totals.balance_due == (
            totals.subtotal - totals.paid_amount - totals.discount
        )
        assert totals.discount >= ZERO

    def test_empty(self):
        totals = calculate_totals([])
        assert totals.subtotal == ZERO
        assert totals.balance_due == ZERO

    def test_fixed_fees_count_as_expenses(self, acme_project, retainer_entry):
        priced = price_entries([retainer_entry], [acme_project])
        totals = calculate_totals(priced)
        assert totals.time_total == ZERO
        assert totals.expense_total == Decimal("500")


class TestPaidAmountFromEntries:
    """Test deriving the paid amount from entry payment status."""

    def test_sums_paid_entries(self, acme_project, time_entry):
        paid_fee = FixedFeeEntry(
            id="f1",
            project_id="p1",
            date=dt.date(2024, 5, 1),
            amount="250",
            status=PaymentStatus.PAID,
        )
        pending_fee = FixedFeeEntry(
            id="f2",
            project_id="p1",
            date=dt.date(2024, 5, 2),
            amount="300",
            status=PaymentStatus.PENDING,
        )
        priced = price_entries([time_entry, paid_fee, pending_fee], [acme_project])
        assert paid_amount_from_entries(priced) == Decimal("250")

    def test_nothing_paid(self, acme_priced):
        assert paid_amount_from_entries(acme_priced) == ZERO
