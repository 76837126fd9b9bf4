"""Data models for the invoice engine.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- Client, Project: The client/project directory
- LedgerEntry: Discriminated union of TimeEntry, ExpenseEntry,
  FixedFeeEntry and MediaSpendEntry
- Invoice, InvoiceLineItem: Generated invoice snapshots
- LedgerSnapshot: The consistent view handed to the engine
"""

from invoice_engine.models.base import BaseDataModel
from invoice_engine.models.client import Client, ClientStatus, Project, ProjectStatus
from invoice_engine.models.invoice import (
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    PaymentTerms,
)
from invoice_engine.models.ledger import (
    EntryType,
    ExpenseEntry,
    FixedFeeEntry,
    LedgerEntry,
    MediaSpendEntry,
    PaymentStatus,
    TimeEntry,
    parse_ledger_entries,
)
from invoice_engine.models.snapshot import LedgerSnapshot

__all__ = [
    "BaseDataModel",
    "Client",
    "ClientStatus",
    "Project",
    "ProjectStatus",
    "EntryType",
    "PaymentStatus",
    "TimeEntry",
    "ExpenseEntry",
    "FixedFeeEntry",
    "MediaSpendEntry",
    "LedgerEntry",
    "parse_ledger_entries",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    "PaymentTerms",
    "LedgerSnapshot",
]
