"""Unit tests for invoice export."""

import datetime as dt
import json
from decimal import Decimal

import pandas as pd
import pytest

from invoice_engine.models import EntryType, Invoice, InvoiceLineItem, PaymentTerms
from invoice_engine.writers.invoice_writer import (
    LINE_ITEM_COLUMNS,
    InvoiceWriter,
    line_items_frame,
    round_money,
)


@pytest.fixture
def invoice():
    return Invoice(
        invoice_number="T-ACM-2405-01",
        client_id="c1",
        date=dt.date(2024, 5, 31),
        due_date=dt.date(2024, 6, 15),
        terms=PaymentTerms.NET_15,
        items=(
            InvoiceLineItem(
                description="Website - Stock photos",
                quantity=1,
                rate="120",
                amount="120",
                type=EntryType.EXPENSE,
                original_entry_id="e2",
            ),
            InvoiceLineItem(
                description="Website - Design",
                quantity="7.5",
                rate="133.333",
                amount="999.9975",
                type=EntryType.TIME,
                original_entry_id="e1",
                diagnostics=("missing_rate",),
            ),
        ),
        subtotal="1119.9975",
        total="1119.9975",
    )


class TestRoundMoney:
    """Test cent rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [("1.005", "1.01"), ("1.004", "1.00"), ("-2.5", "-2.50"), ("70", "70.00")],
    )
    def test_half_up(self, value, expected):
        assert round_money(Decimal(value)) == Decimal(expected)


class TestLineItemsFrame:
    """Test the tabular line item view."""

    def test_columns_and_rounding(self, invoice):
        df = line_items_frame(invoice.items)

        assert list(df.columns) == LINE_ITEM_COLUMNS
        assert list(df["type"]) == ["EXPENSE", "TIME"]
        assert df.iloc[1]["amount"] == Decimal("1000.00")
        assert df.iloc[1]["rate"] == Decimal("133.33")
        assert df.iloc[1]["diagnostics"] == "missing_rate"

    def test_empty(self):
        df = line_items_frame([])
        assert df.empty
        assert list(df.columns) == LINE_ITEM_COLUMNS


class TestInvoiceWriter:
    """Test writing invoice files."""

    def test_writes_json_and_csv(self, tmp_path, invoice):
        writer = InvoiceWriter(tmp_path / "out")
        json_path, csv_path = writer.write(invoice)

        assert json_path.name == "T-ACM-2405-01.json"
        assert csv_path.name == "T-ACM-2405-01.csv"

        document = json.loads(json_path.read_text(encoding="utf-8"))
        assert document["invoiceNumber"] == "T-ACM-2405-01"
        assert document["dueDate"] == "2024-06-15"
        assert Invoice.model_validate(document).items == invoice.items

        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        assert list(df["original_entry_id"]) == ["e2", "e1"]
        assert list(df["amount"]) == ["120.00", "1000.00"]
