"""Tests for business rule validators."""

import datetime as dt
from decimal import Decimal

from invoice_engine.models import (
    ExpenseEntry,
    FixedFeeEntry,
    Invoice,
    InvoiceLineItem,
    MediaSpendEntry,
    TimeEntry,
)
from invoice_engine.validators.business_validators import BusinessRuleValidators
from invoice_engine.validators.validation_report import ValidationReport

DAY = dt.date(2024, 5, 1)


def invoice(number, *entry_ids):
    items = tuple(
        InvoiceLineItem(
            description="Website - Design",
            quantity=1,
            rate=1,
            amount=1,
            type="TIME",
            original_entry_id=entry_id,
        )
        for entry_id in entry_ids
    )
    return Invoice(
        invoice_number=number, client_id="c1", date=DAY, due_date=DAY, items=items
    )


class TestHours:
    """Test hours checks."""

    def test_negative(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_hours(Decimal("-1"), report)
        assert report.error_count == 1

    def test_zero_is_info(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_hours(Decimal("0"), report)
        assert report.is_valid()
        assert report.info_count == 1

    def test_more_than_a_day(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_hours(Decimal("25"), report)
        assert report.warning_count == 1

    def test_normal(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_hours(Decimal("8"), report)
        assert report.issues == []


class TestEntryPayload:
    """Test type-specific payload checks."""

    def test_negative_cost(self):
        entry = ExpenseEntry(id="x1", project_id="p1", date=DAY, cost=-10)
        report = ValidationReport()
        BusinessRuleValidators.validate_entry_type_payload(entry, report)
        assert [i.field for i in report.get_errors()] == ["cost"]

    def test_high_and_negative_markup(self):
        high = ExpenseEntry(
            id="x1", project_id="p1", date=DAY, cost=10, markup_percent=150
        )
        low = ExpenseEntry(
            id="x2", project_id="p1", date=DAY, cost=10, markup_percent=-5
        )
        report = ValidationReport()
        BusinessRuleValidators.validate_entry_type_payload(high, report)
        BusinessRuleValidators.validate_entry_type_payload(low, report)
        assert report.warning_count == 2
        assert report.is_valid()

    def test_non_positive_quantity(self):
        entry = ExpenseEntry(id="x1", project_id="p1", date=DAY, cost=10, quantity=0)
        report = ValidationReport()
        BusinessRuleValidators.validate_entry_type_payload(entry, report)
        assert [i.field for i in report.get_warnings()] == ["quantity"]

    def test_negative_fee_and_spend(self):
        fee = FixedFeeEntry(id="f1", project_id="p1", date=DAY, amount=-1)
        media = MediaSpendEntry(
            id="m1", project_id="p1", date=DAY, google_spend=-5, meta_spend=10
        )
        report = ValidationReport()
        BusinessRuleValidators.validate_entry_type_payload(fee, report)
        BusinessRuleValidators.validate_entry_type_payload(media, report)
        assert [i.field for i in report.get_errors()] == ["amount", "google_spend"]

    def test_negative_rate(self):
        entry = TimeEntry(id="t1", project_id="p1", date=DAY, hours=1, rate=-100)
        report = ValidationReport()
        BusinessRuleValidators.validate_entry_type_payload(entry, report)
        assert [i.field for i in report.get_errors()] == ["rate"]


class TestInvoiceHistory:
    """Test invoice history checks."""

    def test_duplicate_numbers(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_unique_invoice_numbers(
            [
                invoice("T-ACM-2405-01"),
                invoice("T-ACM-2405-01"),
                invoice("T-ACM-2405-02"),
            ],
            report,
        )
        assert report.error_count == 1
        assert report.issues[0].value == "T-ACM-2405-01"

    def test_entry_billed_twice(self):
        report = ValidationReport()
        BusinessRuleValidators.validate_single_billing(
            [invoice("T-ACM-2405-01", "e1", "e2"), invoice("T-ACM-2406-01", "e2")],
            report,
        )
        assert report.warning_count == 1
        assert report.issues[0].value == "e2"
        assert "T-ACM-2405-01, T-ACM-2406-01" in report.issues[0].message
