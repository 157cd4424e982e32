"""Unit tests for ValidationReport."""

from eph_billing.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)


class TestValidationIssue:
    """Test ValidationIssue formatting."""

    def test_str_without_context(self):
        issue = ValidationIssue(
            severity=ValidationSeverity.ERROR,
            field="saturday.min_hours",
            message="Minimum hours required",
        )
        assert str(issue) == "[ERROR] saturday.min_hours: Minimum hours required"

    def test_str_with_context(self):
        issue = ValidationIssue(
            severity=ValidationSeverity.WARNING,
            field="is_strike_day",
            message="Strike day",
            value=True,
            context={"date": "2024-03-04", "subject": "EX-01"},
        )
        assert str(issue).endswith("(date=2024-03-04, subject=EX-01)")


class TestValidationReport:
    """Test collecting issues."""

    def test_empty_report_is_valid(self):
        report = ValidationReport()

        assert report.is_valid()
        assert not report.has_errors()
        assert report.summary() == "No issues found"
        assert report.format() == "Validation successful - no issues found"

    def test_warnings_do_not_invalidate(self):
        report = ValidationReport()
        report.add_warning("rain_days.min_hours", "Below threshold", 0.5)
        report.add_info("breakdown.enabled", "Disabled", False)

        assert report.is_valid()
        assert report.warning_count == 1
        assert report.info_count == 1

    def test_errors_invalidate(self):
        report = ValidationReport()
        issue = report.add_error("sunday", "Missing section")

        assert issue.severity == ValidationSeverity.ERROR
        assert not report.is_valid()
        assert report.get_errors() == [issue]

    def test_get_issues_by_severity(self):
        report = ValidationReport()
        report.add_info("a", "first")
        report.add_error("b", "second")
        report.add_info("c", "third")

        assert [i.field for i in report.get_info()] == ["a", "c"]
        assert [i.field for i in report.get_warnings()] == []

    def test_merge(self):
        first = ValidationReport()
        first.add_error("weekdays", "Missing")
        second = ValidationReport()
        second.add_warning("sunday.rate_multiplier", "Zero")

        first.merge(second)

        assert len(first.issues) == 2
        assert first.summary() == "1 error(s), 1 warning(s)"

    def test_format_orders_by_severity(self):
        report = ValidationReport()
        report.add_info("breakdown.enabled", "Disabled")
        report.add_error("sunday", "Missing section")

        text = report.format()

        assert text.startswith("Validation Report - 1 error(s), 1 info message(s)")
        assert text.index("ERRORS:") < text.index("INFO:")
        assert "WARNINGS:" not in text
