"""Validation layer for ledger data quality and business rule compliance."""

from invoice_engine.validators.business_validators import BusinessRuleValidators
from invoice_engine.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)
from invoice_engine.validators.validator import LedgerValidator

__all__ = [
    "LedgerValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
    "BusinessRuleValidators",
]
