"""Invoice data models.

An invoice is generated once from a filtered ledger and is immutable
afterwards apart from its lifecycle status. Line items are value snapshots of
the ledger entries they came from, so later edits to an entry never change
an invoice that has already been generated.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from pydantic import Field, field_validator

from invoice_engine.models.base import BaseDataModel, to_decimal
from invoice_engine.models.ledger import EntryType


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"


class PaymentTerms(str, Enum):
    """Payment terms selectable when generating an invoice."""

    DUE_ON_RECEIPT = "DUE_ON_RECEIPT"
    NET_15 = "NET_15"
    NET_30 = "NET_30"
    CUSTOM = "CUSTOM"


class InvoiceLineItem(BaseDataModel):
    """A priced, flattened projection of one ledger entry.

    Attributes:
        description: "{project name} - {entry description}"
        quantity: Hours for time entries, units otherwise
        rate: Unit rate (amount / quantity, 0 when quantity is 0)
        amount: Resolved amount of the entry
        type: Type tag of the source entry
        original_entry_id: Identifier of the source ledger entry
        diagnostics: Flags raised while pricing (e.g. "non_finite_amount")
    """

    description: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    type: EntryType
    original_entry_id: Optional[str] = None
    diagnostics: Tuple[str, ...] = ()

    @field_validator("quantity", "rate", "amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v)


class Invoice(BaseDataModel):
    """An issued invoice.

    The ``invoice_number`` follows ``{prefix}-{CLIENT}-{YYMM}-{SEQ}``; see
    :mod:`invoice_engine.calculators.invoice_numbering`. Tax is always zero.

    Example:
        >>> invoice = Invoice(
        ...     invoice_number="T-ACM-2405-01",
        ...     client_id="c1",
        ...     date=dt.date(2024, 5, 20),
        ...     due_date=dt.date(2024, 6, 4),
        ...     terms=PaymentTerms.NET_15,
        ...     subtotal=Decimal("1320"),
        ...     total=Decimal("1320"),
        ... )
        >>> invoice.with_status(InvoiceStatus.PAID).status
        <InvoiceStatus.PAID: 'PAID'>
    """

    id: Optional[str] = Field(None, description="Assigned by the persistence layer")
    invoice_number: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    date: dt.date = Field(..., description="Issue date")
    due_date: dt.date
    terms: PaymentTerms = PaymentTerms.DUE_ON_RECEIPT
    items: Tuple[InvoiceLineItem, ...] = ()
    subtotal: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    status: InvoiceStatus = InvoiceStatus.DRAFT
    created_at: Optional[dt.datetime] = None

    @field_validator("subtotal", "tax", "total", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v)

    @property
    def entry_ids(self) -> Tuple[str, ...]:
        """Identifiers of the ledger entries billed on this invoice."""
        return tuple(
            item.original_entry_id for item in self.items if item.original_entry_id
        )

    def with_status(self, status: InvoiceStatus) -> "Invoice":
        """Return a copy of this invoice with a new lifecycle status.

        Status is the only field that changes after an invoice is created.
        """
        return self.model_copy(update={"status": InvoiceStatus(status)})
