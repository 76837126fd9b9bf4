"""Client and project data models.

Clients own projects; projects own ledger entries. Deleting a project does
not cascade, so entries may reference a project that no longer exists.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, Field, field_validator

from invoice_engine.models.base import BaseDataModel, to_decimal


class ClientStatus(str, Enum):
    """Lifecycle status of a client."""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class Client(BaseDataModel):
    """Represents a client.

    Attributes:
        id: Unique client identifier
        name: Display name, also used to derive invoice numbers
        address: Postal address
        contact_person: Name of the billing contact
        email: Billing email address
        phone: Contact phone number
        default_rate: Default hourly rate for new projects
        status: Lifecycle status
        created_at: Creation timestamp

    Example:
        >>> client = Client(id="c1", name="Acme Corp", default_rate=150)
        >>> client.default_rate
        Decimal('150')
    """

    id: str = Field(..., min_length=1, description="Unique client identifier")
    name: str = Field(..., min_length=1, description="Client display name")
    address: str = ""
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    default_rate: Decimal = Field(Decimal("0"), description="Default hourly rate")
    status: ClientStatus = ClientStatus.ACTIVE
    created_at: Optional[dt.datetime] = None

    @field_validator("id", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that identifying fields are not whitespace only."""
        if not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("default_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v)


class Project(BaseDataModel):
    """Represents a project owned by a client.

    The owning client is accepted as ``clientId``, ``client_id`` or
    ``client``; older store documents keyed projects by client name.

    Attributes:
        id: Unique project identifier
        name: Project name, shown on invoice line items
        client_id: Identifier of the owning client
        hourly_rate: Fallback hourly rate for time entries
        start_date: Optional project start date
        status: Lifecycle status
        created_at: Creation timestamp

    Example:
        >>> project = Project(
        ...     id="p1", name="Brand Refresh", client_id="Acme Corp", hourly_rate=150
        ... )
        >>> project.client_id
        'Acme Corp'
    """

    id: str = Field(..., min_length=1, description="Unique project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    client_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("clientId", "client_id", "client"),
        description="Owning client identifier",
    )
    hourly_rate: Decimal = Field(Decimal("0"), description="Fallback hourly rate")
    start_date: Optional[dt.date] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: Optional[dt.datetime] = None

    @field_validator("id", "name", "client_id")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Args:
            v: The value to validate
            info: Field validation info

        Returns:
            The validated value

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("hourly_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return to_decimal(v)
