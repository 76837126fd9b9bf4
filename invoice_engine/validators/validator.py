"""Main validator orchestrator for ledger validation.

This module provides the LedgerValidator class that coordinates entry-level
and invoice-history business rule validation.
"""

import logging
from typing import Iterable, Optional

from invoice_engine.models.client import Project
from invoice_engine.models.invoice import Invoice
from invoice_engine.models.ledger import LedgerEntry
from invoice_engine.models.snapshot import LedgerSnapshot
from invoice_engine.validators.business_validators import BusinessRuleValidators
from invoice_engine.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)


class LedgerValidator:
    """Validator for ledger entries and invoice history.

    Example:
        >>> validator = LedgerValidator(projects)
        >>> report = validator.validate_entries(entries)
        >>> if not report.is_valid():
        ...     print(report.format())
    """

    def __init__(self, projects: Optional[Iterable[Project]] = None) -> None:
        """Initialize the validator.

        Args:
            projects: Project directory used to check project references;
                without one, references are not checked
        """
        self.project_map = (
            {p.id: p for p in projects} if projects is not None else None
        )

    def validate_entry(self, entry: LedgerEntry) -> ValidationReport:
        """Validate a single ledger entry.

        Args:
            entry: The entry to validate

        Returns:
            ValidationReport with any issues found
        """
        report = ValidationReport()
        context = {"entry": entry.id, "type": entry.type}

        BusinessRuleValidators.validate_entry_type_payload(entry, report, context)
        if self.project_map is not None:
            BusinessRuleValidators.validate_project_reference(
                entry, self.project_map, report, context
            )
        return report

    def validate_entries(self, entries: Iterable[LedgerEntry]) -> ValidationReport:
        """Validate multiple ledger entries.

        Args:
            entries: Entries to validate

        Returns:
            ValidationReport with all issues found across all entries
        """
        report = ValidationReport()
        count = 0
        for entry in entries:
            report.merge(self.validate_entry(entry))
            count += 1

        logger.info(f"Validated {count} entries: {report.summary()}")
        return report

    def validate_invoices(self, invoices: Iterable[Invoice]) -> ValidationReport:
        """Validate invoice history for duplicate numbers and double billing.

        Args:
            invoices: Invoice history

        Returns:
            ValidationReport with any issues found
        """
        invoices = list(invoices)
        report = ValidationReport()
        BusinessRuleValidators.validate_unique_invoice_numbers(invoices, report)
        BusinessRuleValidators.validate_single_billing(invoices, report)
        return report

    @classmethod
    def validate_snapshot(cls, snapshot: LedgerSnapshot) -> ValidationReport:
        """Validate every entry and the invoice history of a snapshot."""
        validator = cls(snapshot.projects)
        report = validator.validate_entries(snapshot.entries)
        report.merge(validator.validate_invoices(snapshot.invoices))
        return report
