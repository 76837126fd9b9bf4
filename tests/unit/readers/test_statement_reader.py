"""Unit tests for statement import."""

import datetime as dt
import itertools
from decimal import Decimal

import pytest

from invoice_engine.models import ExpenseEntry, PaymentStatus
from invoice_engine.readers.statement_reader import StatementReader

REPLY = """Here are the transactions I found:
[
  {"date": "2024-05-03", "description": "Adobe Creative Cloud", "amount": 54.99},
  {"date": "2024-05-07", "description": "Uber to client", "amount": -23.40},
  {"date": "not a date", "description": "Broken row", "amount": 10},
  {"date": "2024-05-09", "description": "   ", "amount": 5}
]
Let me know if you need anything else."""


@pytest.fixture
def reader():
    counter = itertools.count(1)
    return StatementReader(
        markup_percent=Decimal("20"), id_factory=lambda: f"x{next(counter)}"
    )


class TestParseResponse:
    """Test parsing of extraction replies."""

    def test_extracts_array_from_prose(self, reader):
        candidates = reader.parse_response(REPLY)

        assert [c.description for c in candidates] == [
            "Adobe Creative Cloud",
            "Uber to client",
        ]
        assert candidates[0].amount == Decimal("54.99")
        assert candidates[1].date == dt.date(2024, 5, 7)

    def test_amounts_are_positive(self, reader):
        candidates = reader.parse_response(REPLY)
        assert candidates[1].amount == Decimal("23.4")

    def test_bare_array(self, reader):
        candidates = reader.parse_response(
            '[{"date": "2024-05-01", "description": "Fonts", "amount": "12"}]'
        )
        assert len(candidates) == 1

    def test_empty_array(self, reader):
        assert reader.parse_response("Nothing found: []") == []

    @pytest.mark.parametrize("text", ["no transactions here", '{"date": "x"}'])
    def test_no_array(self, reader, text):
        with pytest.raises(ValueError):
            reader.parse_response(text)


class TestToExpenseEntries:
    """Test conversion of candidates into ledger entries."""

    def test_creates_pending_expenses(self, reader):
        created = dt.datetime(2024, 5, 31, 10, 0)
        entries = reader.to_expense_entries(
            reader.parse_response(REPLY), "p1", created_at=created
        )

        assert all(isinstance(e, ExpenseEntry) for e in entries)
        assert [e.id for e in entries] == ["x1", "x2"]
        assert entries[0].project_id == "p1"
        assert entries[0].cost == Decimal("54.99")
        assert entries[0].markup_percent == Decimal("20")
        assert entries[0].status == PaymentStatus.PENDING
        assert entries[0].created_at == created

    def test_default_ids_are_unique(self):
        reader = StatementReader()
        candidates = reader.parse_response(REPLY)
        entries = reader.to_expense_entries(candidates, "p1")
        assert len({e.id for e in entries}) == len(entries)
