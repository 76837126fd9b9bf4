"""Business rule validators for ledger data.

The rate resolver prices whatever it is given, so these checks run before
resolution: negative quantities, missing project references, unusual
markups, and invoice-history problems such as duplicate invoice numbers.
"""

from collections import Counter, defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from invoice_engine.models.client import Project
from invoice_engine.models.invoice import Invoice
from invoice_engine.models.ledger import EntryType, LedgerEntry
from invoice_engine.validators.validation_report import ValidationReport

ZERO = Decimal("0")
MAX_HOURS_PER_ENTRY = Decimal("24")
HIGH_MARKUP_PERCENT = Decimal("100")


class BusinessRuleValidators:
    """Collection of business rule validation methods.

    This class provides static methods that add issues to a report; none of
    them raise.
    """

    @staticmethod
    def validate_non_negative(
        field: str,
        value: Optional[Decimal],
        report: ValidationReport,
        context: Optional[Dict] = None,
    ) -> None:
        """Report a negative amount, hours or spend as an error.

        Args:
            field: Field name for the report
            value: Value to check; None is skipped
            report: ValidationReport to collect issues
            context: Optional context information
        """
        if value is not None and value < ZERO:
            report.add_error(
                field, f"{field} cannot be negative ({value})", value, context
            )

    @staticmethod
    def validate_hours(
        hours: Decimal, report: ValidationReport, context: Optional[Dict] = None
    ) -> None:
        """Validate the hours of a time entry.

        Args:
            hours: Hours worked
            report: ValidationReport to collect issues
            context: Optional context information
        """
        if hours < ZERO:
            report.add_error(
                "hours", f"Hours cannot be negative ({hours})", hours, context
            )
        elif hours == ZERO:
            report.add_info("hours", "Time entry has zero hours", hours, context)
        elif hours > MAX_HOURS_PER_ENTRY:
            report.add_warning(
                "hours",
                f"Hours ({hours}) exceed {MAX_HOURS_PER_ENTRY} in a single entry",
                hours,
                context,
            )

    @staticmethod
    def validate_markup(
        markup_percent: Optional[Decimal],
        report: ValidationReport,
        context: Optional[Dict] = None,
    ) -> None:
        """Validate the markup of an expense.

        Args:
            markup_percent: Markup percentage, None meaning no markup
            report: ValidationReport to collect issues
            context: Optional context information
        """
        if markup_percent is None:
            return
        if markup_percent < ZERO:
            report.add_warning(
                "markup_percent",
                f"Negative markup ({markup_percent}%) bills below cost",
                markup_percent,
                context,
            )
        elif markup_percent > HIGH_MARKUP_PERCENT:
            report.add_warning(
                "markup_percent",
                f"Markup ({markup_percent}%) is unusually high",
                markup_percent,
                context,
            )

    @staticmethod
    def validate_project_reference(
        entry: LedgerEntry,
        project_map: Dict[str, Project],
        report: ValidationReport,
        context: Optional[Dict] = None,
    ) -> None:
        """Warn about entries whose project is not in the directory.

        Such entries are left off client invoices and shown as
        "Unassigned" in project groupings.
        """
        if entry.project_id not in project_map:
            report.add_warning(
                "project_id",
                f"Unknown project '{entry.project_id}'; entry will not be invoiced",
                entry.project_id,
                context,
            )

    @staticmethod
    def validate_unique_invoice_numbers(
        invoices: Iterable[Invoice], report: ValidationReport
    ) -> None:
        """Report invoice numbers used more than once.

        Duplicates arise when two invoices for the same client and month
        were generated without seeing each other.
        """
        counts = Counter(invoice.invoice_number for invoice in invoices)
        for number, count in sorted(counts.items()):
            if count > 1:
                report.add_error(
                    "invoice_number",
                    f"Invoice number used by {count} invoices",
                    number,
                )

    @staticmethod
    def validate_single_billing(
        invoices: Iterable[Invoice], report: ValidationReport
    ) -> None:
        """Warn about ledger entries billed on more than one invoice."""
        billed_on: Dict[str, List[str]] = defaultdict(list)
        for invoice in invoices:
            for entry_id in invoice.entry_ids:
                billed_on[entry_id].append(invoice.invoice_number)

        for entry_id, numbers in sorted(billed_on.items()):
            if len(numbers) > 1:
                report.add_warning(
                    "original_entry_id",
                    f"Entry billed on {len(numbers)} invoices: {', '.join(numbers)}",
                    entry_id,
                )

    @staticmethod
    def validate_entry_type_payload(
        entry: LedgerEntry, report: ValidationReport, context: Optional[Dict] = None
    ) -> None:
        """Validate the type-specific payload of an entry."""
        if entry.type == EntryType.TIME:
            BusinessRuleValidators.validate_hours(entry.hours, report, context)
            BusinessRuleValidators.validate_non_negative(
                "rate", entry.rate, report, context
            )
            BusinessRuleValidators.validate_non_negative(
                "rate_multiplier", entry.rate_multiplier, report, context
            )
        elif entry.type == EntryType.EXPENSE:
            BusinessRuleValidators.validate_non_negative(
                "cost", entry.cost, report, context
            )
            BusinessRuleValidators.validate_markup(
                entry.markup_percent, report, context
            )
            if entry.quantity is not None and entry.quantity <= ZERO:
                report.add_warning(
                    "quantity",
                    f"Quantity ({entry.quantity}) must be positive; unit rate shows 0",
                    entry.quantity,
                    context,
                )
        elif entry.type == EntryType.FIXED_FEE:
            BusinessRuleValidators.validate_non_negative(
                "amount", entry.amount, report, context
            )
        else:
            BusinessRuleValidators.validate_non_negative(
                "google_spend", entry.google_spend, report, context
            )
            BusinessRuleValidators.validate_non_negative(
                "meta_spend", entry.meta_spend, report, context
            )
