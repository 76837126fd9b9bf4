"""Statement reader for extraction-service output.

An external document-extraction service reads scanned card or bank
statements and replies with text containing a JSON array of transactions:

    [{"date": "2024-05-03", "description": "Adobe", "amount": 54.99}, ...]

The reply may wrap the array in prose. This reader pulls the array out,
validates each row into a StatementCandidate, and turns the rows a user
accepted into ordinary EXPENSE ledger entries. Those entries go through the
same validation as manually entered expenses.
"""

import datetime as dt
import json
import logging
import re
import uuid
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from pydantic import Field, ValidationError, field_validator

from invoice_engine.models.base import BaseDataModel, to_decimal
from invoice_engine.models.ledger import ExpenseEntry, PaymentStatus

logger = logging.getLogger(__name__)

DEFAULT_MARKUP_PERCENT = Decimal("20")

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


class StatementCandidate(BaseDataModel):
    """One transaction proposed by the extraction service.

    Attributes:
        date: Transaction date
        description: Cleaned merchant name
        amount: Charged amount; stored as an absolute value
    """

    date: dt.date
    description: str = Field(..., min_length=1)
    amount: Decimal

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description cannot be empty or whitespace")
        return v.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return abs(to_decimal(v))


class StatementReader:
    """Converts extraction-service replies into expense entries.

    Attributes:
        markup_percent: Markup applied to imported expenses
        id_factory: Callable producing ids for new entries

    Example:
        >>> reader = StatementReader(markup_percent=Decimal("20"))
        >>> candidates = reader.parse_response(reply_text)
        >>> entries = reader.to_expense_entries(candidates, project_id="p1")
    """

    def __init__(
        self,
        markup_percent: Decimal = DEFAULT_MARKUP_PERCENT,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize the reader.

        Args:
            markup_percent: Markup applied to imported expenses
            id_factory: Callable producing ids for new entries (uuid4 hex
                by default)
        """
        self.markup_percent = markup_percent
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def parse_response(self, text: str) -> List[StatementCandidate]:
        """Extract candidate transactions from an extraction reply.

        Rows that fail validation are skipped with a warning rather than
        failing the whole statement.

        Args:
            text: Raw text reply of the extraction service

        Returns:
            Valid candidates in reply order

        Raises:
            ValueError: If the reply contains no JSON array
        """
        match = _JSON_ARRAY.search(text)
        payload = match.group(0) if match else text
        try:
            rows = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"Extraction reply contains no JSON array: {e}")
        if not isinstance(rows, list):
            raise ValueError("Extraction reply is not a JSON array")

        candidates = []
        for index, row in enumerate(rows):
            try:
                candidates.append(StatementCandidate.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping statement row {index}: "
                    f"{e.error_count()} validation errors"
                )

        logger.info(f"Parsed {len(candidates)} of {len(rows)} statement rows")
        return candidates

    def to_expense_entries(
        self,
        candidates: Iterable[StatementCandidate],
        project_id: str,
        created_at: Optional[dt.datetime] = None,
    ) -> List[ExpenseEntry]:
        """Turn accepted candidates into EXPENSE ledger entries.

        Args:
            candidates: Candidates the user accepted
            project_id: Project the charges belong to
            created_at: Creation timestamp for the new entries

        Returns:
            Pending expense entries carrying the configured markup
        """
        return [
            ExpenseEntry(
                id=self.id_factory(),
                project_id=project_id,
                date=candidate.date,
                description=candidate.description,
                cost=candidate.amount,
                markup_percent=self.markup_percent,
                status=PaymentStatus.PENDING,
                created_at=created_at,
            )
            for candidate in candidates
        ]
