"""Ledger entry data models.

A ledger entry is one billable event. Each entry carries exactly one type
tag and the payload that belongs to that tag, modelled as a discriminated
union so that, for example, a time entry simply has no ``cost`` field.

Types:
- TimeEntry: hours worked, optionally at an overridden rate or multiplier
- ExpenseEntry: a cost passed through with a markup
- FixedFeeEntry: a flat fee such as a monthly retainer
- MediaSpendEntry: third-party ad spend that attracts percentage fees
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter, field_validator, model_validator

from invoice_engine.models.base import BaseDataModel, to_decimal


class EntryType(str, Enum):
    """Type tag of a ledger entry."""

    TIME = "TIME"
    EXPENSE = "EXPENSE"
    FIXED_FEE = "FIXED_FEE"
    MEDIA_SPEND = "MEDIA_SPEND"


class PaymentStatus(str, Enum):
    """Payment status of a ledger entry, used for reconciliation."""

    PENDING = "PENDING"
    PAID = "PAID"


class LedgerEntryBase(BaseDataModel):
    """Fields shared by every ledger entry type.

    Attributes:
        id: Unique entry identifier
        project_id: Identifier of the owning project
        date: Calendar day of the event
        description: Free-text description shown on the invoice
        status: Optional payment status (PENDING or PAID)
        created_at: Creation timestamp
    """

    id: str = Field(..., min_length=1, description="Unique entry identifier")
    project_id: str = Field(..., description="Owning project identifier")
    date: dt.date = Field(..., description="Date of the billable event")
    description: str = Field("", description="Free-text description")
    status: Optional[PaymentStatus] = None
    created_at: Optional[dt.datetime] = None


class TimeEntry(LedgerEntryBase):
    """Hours worked on a project.

    Example:
        >>> entry = TimeEntry(
        ...     id="l1",
        ...     project_id="p1",
        ...     date=dt.date(2024, 5, 2),
        ...     description="Initial moodboarding",
        ...     hours=4,
        ... )
        >>> entry.hours
        Decimal('4')
    """

    type: Literal["TIME"] = "TIME"
    hours: Decimal = Field(..., description="Hours worked")
    rate: Optional[Decimal] = Field(None, description="Hourly rate override")
    rate_multiplier: Optional[Decimal] = Field(
        None, description="Multiplier on the hourly rate, e.g. 1.5 for overtime"
    )

    @field_validator("hours", "rate", "rate_multiplier", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        if v is None:
            return v
        return to_decimal(v)


class ExpenseEntry(LedgerEntryBase):
    """A project expense re-billed with a markup.

    ``quantity`` is the number of units the cost covers (for instance
    several stock licences bought in one charge); it only affects how the
    line item is presented, never the amount.
    """

    type: Literal["EXPENSE"] = "EXPENSE"
    cost: Decimal = Field(..., description="Internal cost")
    markup_percent: Optional[Decimal] = Field(None, description="Markup percentage")
    quantity: Optional[Decimal] = Field(None, description="Units covered by cost")

    @field_validator("cost", "markup_percent", "quantity", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        if v is None:
            return v
        return to_decimal(v)


class FixedFeeEntry(LedgerEntryBase):
    """A flat fee entered directly, e.g. a monthly retainer."""

    type: Literal["FIXED_FEE"] = "FIXED_FEE"
    amount: Decimal = Field(..., description="Declared fee amount")

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v)


_MEDIA_DETAIL_FIELDS = (
    ("googleSpend", "google_spend"),
    ("metaSpend", "meta_spend"),
    ("billingMonth", "billing_month"),
)


class MediaSpendEntry(LedgerEntryBase):
    """Third-party ad spend managed on behalf of the client.

    The spend itself is a pass-through cost and is never billed; only the
    fees computed from it are.
    """

    type: Literal["MEDIA_SPEND"] = "MEDIA_SPEND"
    google_spend: Decimal = Field(Decimal("0"), description="Google Ads spend")
    meta_spend: Decimal = Field(Decimal("0"), description="Meta Ads spend")
    billing_month: Optional[str] = Field(
        None, pattern=r"^\d{4}-\d{2}$", description="Billing month (YYYY-MM)"
    )

    @model_validator(mode="before")
    @classmethod
    def lift_media_details(cls, data):
        """Accept the stored shape, where spend sits under ``mediaDetails``.

        Flat fields win when both are present.
        """
        if not isinstance(data, dict):
            return data
        details = data.get("mediaDetails") or data.get("media_details")
        if not isinstance(details, dict):
            return data
        lifted = dict(data)
        for camel, snake in _MEDIA_DETAIL_FIELDS:
            if camel in details and camel not in data and snake not in data:
                lifted[camel] = details[camel]
        return lifted

    @field_validator("google_spend", "meta_spend", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        if v is None:
            return Decimal("0")
        return to_decimal(v)

    @property
    def spend(self) -> Decimal:
        """Total ad spend across platforms."""
        return self.google_spend + self.meta_spend


LedgerEntry = Annotated[
    Union[TimeEntry, ExpenseEntry, FixedFeeEntry, MediaSpendEntry],
    Field(discriminator="type"),
]

_ledger_adapter = TypeAdapter(List[LedgerEntry])


def parse_ledger_entries(data: list) -> List[LedgerEntry]:
    """Validate a list of raw entry documents into typed ledger entries.

    Args:
        data: List of dictionaries, each carrying a ``type`` tag

    Returns:
        List of TimeEntry, ExpenseEntry, FixedFeeEntry or MediaSpendEntry

    Raises:
        pydantic.ValidationError: If a document is malformed or has an
            unknown type tag
    """
    return _ledger_adapter.validate_python(data)
