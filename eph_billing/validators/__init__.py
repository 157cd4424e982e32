"""Validation layer for billing configurations and entry sets."""

from eph_billing.validators.config_validator import BillingConfigValidator
from eph_billing.validators.entry_validator import EntrySetValidator
from eph_billing.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "BillingConfigValidator",
    "EntrySetValidator",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
]
