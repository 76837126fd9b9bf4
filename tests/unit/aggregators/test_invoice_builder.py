"""Unit tests for invoice assembly.

This module tests the full pipeline from snapshot to invoice:
- Line item flattening
- Preview totals, numbering and terms
- Built invoice snapshots
"""

import datetime as dt
from decimal import Decimal

import pytest

from invoice_engine.aggregators.invoice_builder import (
    InvoiceBuilder,
    InvoiceRequest,
    build_line_item,
)
from invoice_engine.aggregators.ledger_filter import DateWindow
from invoice_engine.calculators.rate_resolver import (
    MISSING_RATE,
    ZERO_QUANTITY,
    price_entries,
)
from invoice_engine.models import (
    EntryType,
    ExpenseEntry,
    FixedFeeEntry,
    Invoice,
    InvoiceStatus,
    LedgerSnapshot,
    MediaSpendEntry,
    PaymentStatus,
    PaymentTerms,
    TimeEntry,
)

NOW = dt.datetime(2024, 5, 31, 9, 0)


@pytest.fixture
def builder(acme_snapshot):
    return InvoiceBuilder(acme_snapshot, invoice_prefix="T")


class TestBuildLineItem:
    """Test flattening priced entries into line items."""

    def test_time_item(self, acme_project, time_entry):
        priced = price_entries([time_entry], [acme_project])[0]
        item = build_line_item(priced)

        assert item.description == "Website - Design"
        assert item.quantity == Decimal("8")
        assert item.rate == Decimal("150")
        assert item.amount == Decimal("1200")
        assert item.type == EntryType.TIME
        assert item.original_entry_id == "e1"

    def test_time_item_rate_includes_multiplier(self, acme_project):
        entry = TimeEntry(
            id="t1",
            project_id="p1",
            date=dt.date(2024, 5, 2),
            description="Launch night",
            hours=2,
            rate_multiplier="1.5",
        )
        item = build_line_item(price_entries([entry], [acme_project])[0])
        assert item.rate == Decimal("225")
        assert item.amount == Decimal("450")

    def test_expense_item(self, acme_project, expense_entry):
        item = build_line_item(price_entries([expense_entry], [acme_project])[0])
        assert item.quantity == Decimal("1")
        assert item.rate == Decimal("120")
        assert item.amount == Decimal("120")

    def test_expense_quantity(self, acme_project):
        entry = ExpenseEntry(
            id="x1",
            project_id="p1",
            date=dt.date(2024, 5, 2),
            description="Licences",
            cost=90,
            quantity=3,
        )
        item = build_line_item(price_entries([entry], [acme_project])[0])
        assert item.quantity == Decimal("3")
        assert item.rate == Decimal("30")
        assert item.amount == Decimal("90")

    def test_zero_quantity_flagged(self, acme_project):
        entry = ExpenseEntry(
            id="x1", project_id="p1", date=dt.date(2024, 5, 2), cost=90, quantity=0
        )
        item = build_line_item(price_entries([entry], [acme_project])[0])
        assert item.rate == Decimal("0")
        assert item.amount == Decimal("90")
        assert ZERO_QUANTITY in item.diagnostics

    def test_orphan_item(self):
        entry = TimeEntry(
            id="t1",
            project_id="gone",
            date=dt.date(2024, 5, 2),
            description="X",
            hours=1,
        )
        item = build_line_item(price_entries([entry], [])[0])
        assert item.description == "Unassigned - X"
        assert MISSING_RATE in item.diagnostics


class TestPreview:
    """Test invoice previews."""

    def test_acme_preview(self, builder):
        request = InvoiceRequest(
            client_id="c1",
            date_window=DateWindow.for_month("2024-05"),
            terms=PaymentTerms.NET_15,
        )
        preview = builder.preview(request, NOW)

        assert preview.invoice_number == "T-ACM-2405-01"
        assert preview.issue_date == dt.date(2024, 5, 31)
        assert preview.due_date == dt.date(2024, 6, 15)
        assert preview.terms_label == "Net 15"
        assert [i.original_entry_id for i in preview.line_items] == ["e2", "e1"]
        assert preview.totals.subtotal == Decimal("1320")
        assert preview.totals.balance_due == Decimal("1320")
        assert len(preview.groups) == 1
        assert not preview.is_empty
        assert preview.diagnostics == []

    def test_write_off_with_payment(self, builder):
        request = InvoiceRequest(
            client_id="c1", write_off_excess=True, paid_amount=Decimal("1250")
        )
        totals = builder.preview(request, NOW).totals
        assert totals.discount == Decimal("0")
        assert totals.balance_due == Decimal("70")

    def test_paid_amount_derived_from_paid_entries(self, acme_snapshot):
        paid_fee = FixedFeeEntry(
            id="f1",
            project_id="p1",
            date=dt.date(2024, 5, 1),
            description="Monthly Retainer",
            amount=300,
            status=PaymentStatus.PAID,
        )
        snapshot = acme_snapshot.model_copy(
            update={"entries": [*acme_snapshot.entries, paid_fee]}
        )
        preview = InvoiceBuilder(snapshot).preview(InvoiceRequest(client_id="c1"), NOW)
        assert preview.totals.subtotal == Decimal("1620")
        assert preview.totals.paid_amount == Decimal("300")
        assert preview.totals.balance_due == Decimal("1320")

    def test_media_spend_year_to_date(self, acme_snapshot, media_entry):
        april = MediaSpendEntry(
            id="e5",
            project_id="p2",
            date=dt.date(2024, 4, 30),
            google_spend=Decimal("2500"),
        )
        last_year = MediaSpendEntry(
            id="e6",
            project_id="p2",
            date=dt.date(2023, 12, 31),
            meta_spend=Decimal("900"),
        )
        snapshot = acme_snapshot.model_copy(
            update={"entries": [*acme_snapshot.entries, media_entry, april, last_year]}
        )
        request = InvoiceRequest(
            client_id="c1", date_window=DateWindow.for_month("2024-05")
        )

        preview = InvoiceBuilder(snapshot).preview(request, NOW)

        assert preview.media_spend_ytd == {"e4": Decimal("12500")}
        assert preview.totals.subtotal == Decimal("1320") + Decimal("1950")

    def test_no_media_spend_without_media_entries(self, builder):
        preview = builder.preview(InvoiceRequest(client_id="c1"), NOW)
        assert preview.media_spend_ytd == {}

    def test_custom_terms(self, builder):
        request = InvoiceRequest(
            client_id="c1",
            terms=PaymentTerms.CUSTOM,
            custom_due_date=dt.date(2024, 7, 4),
        )
        preview = builder.preview(request, NOW)
        assert preview.due_date == dt.date(2024, 7, 4)
        assert preview.terms_label == "Due by 7/4/2024"

    def test_numbering_counts_history(self, acme_snapshot):
        previous = Invoice(
            invoice_number="T-ACM-2405-01",
            client_id="c1",
            date=dt.date(2024, 5, 2),
            due_date=dt.date(2024, 5, 2),
        )
        snapshot = acme_snapshot.model_copy(update={"invoices": [previous]})
        preview = InvoiceBuilder(snapshot).preview(InvoiceRequest(client_id="c1"), NOW)
        assert preview.invoice_number == "T-ACM-2405-02"

    def test_unknown_client_name_used_as_is(self, acme_snapshot):
        """Test numbering for a client key missing from the directory."""
        builder = InvoiceBuilder(acme_snapshot, invoice_prefix="INV")
        preview = builder.preview(InvoiceRequest(client_id="Globex"), NOW)
        assert preview.invoice_number == "INV-GLO-2405-01"
        assert preview.is_empty

    def test_no_client_gives_draft(self, builder):
        preview = builder.preview(InvoiceRequest(client_id=""), NOW)
        assert preview.invoice_number == "T-DRAFT"
        assert preview.is_empty
        assert preview.totals.subtotal == Decimal("0")

    def test_does_not_mutate_snapshot(self, builder, acme_snapshot):
        before = acme_snapshot.model_dump()
        builder.preview(InvoiceRequest(client_id="c1"), NOW)
        assert acme_snapshot.model_dump() == before


class TestBuild:
    """Test built invoice snapshots."""

    def test_build_acme(self, builder):
        request = InvoiceRequest(client_id="c1", terms=PaymentTerms.NET_30)
        invoice = builder.build(request, NOW)

        assert invoice.invoice_number == "T-ACM-2405-01"
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.date == dt.date(2024, 5, 31)
        assert invoice.due_date == dt.date(2024, 6, 30)
        assert invoice.subtotal == Decimal("1320")
        assert invoice.tax == Decimal("0")
        assert invoice.total == Decimal("1320")
        assert invoice.entry_ids == ("e2", "e1")
        assert invoice.created_at == NOW

    def test_build_with_status(self, builder):
        invoice = builder.build(
            InvoiceRequest(client_id="c1"), NOW, status=InvoiceStatus.DRAFT
        )
        assert invoice.status == InvoiceStatus.DRAFT

    def test_build_without_client(self, builder):
        assert builder.build(InvoiceRequest(client_id=""), NOW) is None

    def test_empty_snapshot(self):
        builder = InvoiceBuilder(LedgerSnapshot())
        invoice = builder.build(InvoiceRequest(client_id="c1"), NOW)
        assert invoice.items == ()
        assert invoice.total == Decimal("0")
