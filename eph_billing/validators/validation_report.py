"""Validation report for collecting and formatting data-quality issues."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """A single finding about a billing configuration or entry set.

    Attributes:
        severity: The severity level of the issue
        field: Where the issue was found, e.g. ``saturday.min_hours`` or
            ``entries``
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Optional context information (date, subject, role)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any = None
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        """Return string representation of the issue.

        Returns:
            Formatted string with severity, field, and message
        """
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"

        return f"[{self.severity.name}] {self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects validation issues without raising.

    Validators add errors, warnings and info messages while walking a
    configuration or an entry set; the caller decides what to do with the
    result.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("saturday.min_hours", "Minimum hours required", None)
        >>> report.add_info("breakdown", "Breakdown hours are not billed", False)
        >>> report.is_valid()
        False
        >>> report.summary()
        '1 error(s), 1 info message(s)'
    """

    def __init__(self) -> None:
        """Initialize an empty validation report."""
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors).

        Warnings and info messages do not affect validity.
        """
        return self.error_count == 0

    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ValidationIssue:
        """Add an issue of any severity to the report.

        Returns:
            The added issue
        """
        issue = ValidationIssue(
            severity=severity,
            field=field,
            message=message,
            value=value,
            context=context,
        )
        self.issues.append(issue)
        return issue

    def add_error(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ValidationIssue:
        return self.add(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ValidationIssue:
        return self.add(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ValidationIssue:
        return self.add(ValidationSeverity.INFO, field, message, value, context)

    def get_issues(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        """Get all issues of one severity, in the order they were added."""
        return [issue for issue in self.issues if issue.severity == severity]

    def get_errors(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.WARNING)

    def get_info(self) -> List[ValidationIssue]:
        return self.get_issues(ValidationSeverity.INFO)

    def merge(self, other: "ValidationReport") -> None:
        """Merge another validation report into this one.

        Args:
            other: Another ValidationReport to merge
        """
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Get a summary of the validation report.

        Returns:
            Summary string with counts of errors, warnings, and info messages
        """
        parts = []
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count > 0:
            parts.append(f"{self.info_count} info message(s)")

        if not parts:
            return "No issues found"

        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display.

        Returns:
            Formatted string with all issues grouped by severity, most severe
            first
        """
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]

        for severity, heading in (
            (ValidationSeverity.ERROR, "ERRORS"),
            (ValidationSeverity.WARNING, "WARNINGS"),
            (ValidationSeverity.INFO, "INFO"),
        ):
            issues = self.get_issues(severity)
            if issues:
                lines.append(f"\n{heading}:")
                for issue in issues:
                    lines.append(f"  - {issue}")

        return "\n".join(lines)
