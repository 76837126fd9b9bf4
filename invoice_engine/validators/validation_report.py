"""Collected findings from checking ledger entries and invoice history."""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """How serious a finding is; higher values are worse."""

    INFO = 1
    WARNING = 2
    ERROR = 3


_HEADINGS = {
    ValidationSeverity.ERROR: "ERRORS",
    ValidationSeverity.WARNING: "WARNINGS",
    ValidationSeverity.INFO: "INFO",
}

_SUMMARY_NOUNS = {
    ValidationSeverity.ERROR: "error(s)",
    ValidationSeverity.WARNING: "warning(s)",
    ValidationSeverity.INFO: "info message(s)",
}


@dataclass
class ValidationIssue:
    """One finding about a ledger field.

    ``context`` identifies where it was found, e.g.
    ``{"entry": "e1", "type": "TIME"}`` or ``{"invoice": "T-ACM-2405-01"}``.
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        text = f"[{self.severity.name}] {self.field}: {self.message}"
        if self.context:
            where = ", ".join(f"{k}={v}" for k, v in self.context.items())
            text += f" ({where})"
        return text


class ValidationReport:
    """Findings gathered across one or more validation passes.

    Only ERROR findings make a report invalid. Validators add to a report
    and never raise; the caller decides whether a report blocks billing.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("hours", "Hours cannot be negative (-2)", -2)
        >>> report.add_warning("project_id", "Unknown project", "p9")
        >>> report.summary()
        '1 error(s), 1 warning(s)'
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def _counts(self) -> Counter:
        return Counter(issue.severity for issue in self.issues)

    @property
    def error_count(self) -> int:
        return self._counts()[ValidationSeverity.ERROR]

    @property
    def warning_count(self) -> int:
        return self._counts()[ValidationSeverity.WARNING]

    @property
    def info_count(self) -> int:
        return self._counts()[ValidationSeverity.INFO]

    def is_valid(self) -> bool:
        return not self.has_errors()

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity, field, message, value, context))

    def add_error(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(self, field, message, value, context=None) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, context)

    def get_issues(
        self, min_severity: ValidationSeverity = ValidationSeverity.INFO
    ) -> List[ValidationIssue]:
        """Findings at or above ``min_severity``, most severe first.

        Findings of equal severity keep the order they were added in.
        """
        return sorted(
            (issue for issue in self.issues if issue.severity >= min_severity),
            key=lambda issue: issue.severity,
            reverse=True,
        )

    def get_errors(self) -> List[ValidationIssue]:
        return self._of(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return self._of(ValidationSeverity.WARNING)

    def _of(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    def merge(self, other: "ValidationReport") -> None:
        """Append every finding of ``other`` to this report."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Counts per severity, e.g. ``'1 error(s), 2 warning(s)'``."""
        counts = self._counts()
        parts = [
            f"{counts[severity]} {_SUMMARY_NOUNS[severity]}"
            for severity in sorted(ValidationSeverity, reverse=True)
            if counts[severity]
        ]
        return ", ".join(parts) if parts else "No issues found"

    def format(self, min_severity: ValidationSeverity = ValidationSeverity.INFO) -> str:
        """Render findings grouped under a heading per severity.

        Args:
            min_severity: Sections below this severity are left out
        """
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]
        for severity in sorted(ValidationSeverity, reverse=True):
            group = self._of(severity) if severity >= min_severity else []
            if group:
                lines.append(f"\n{_HEADINGS[severity]}:")
                lines.extend(f"  - {issue}" for issue in group)
        return "\n".join(lines)
