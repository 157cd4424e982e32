"""Validate billing configuration and entry commands."""

from typing import Optional

import click

from eph_billing.cli.error_handlers import EXIT_CONFIGURATION, with_error_handling
from eph_billing.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from eph_billing.cli.utils.options import load_billing_config
from eph_billing.readers.json_reader import read_raw_entries
from eph_billing.validators.config_validator import BillingConfigValidator
from eph_billing.validators.entry_validator import EntrySetValidator
from eph_billing.validators.validation_report import (
    ValidationReport,
    ValidationSeverity,
)

SEVERITY_CHOICES = ["error", "warning", "info"]

# Limit per severity so a bad export does not flood the terminal
MAX_ISSUES_SHOWN = 20


def print_report(report: ValidationReport, min_severity: ValidationSeverity) -> None:
    """Print the summary and every issue at or above ``min_severity``."""
    click.echo()
    click.echo("=" * 60)
    click.echo("Validation Summary")
    click.echo("=" * 60)
    click.echo(f"Errors:           {report.error_count}")
    click.echo(f"Warnings:         {report.warning_count}")
    click.echo(f"Info:             {report.info_count}")

    headings = {
        ValidationSeverity.ERROR: "ERRORS",
        ValidationSeverity.WARNING: "WARNINGS",
        ValidationSeverity.INFO: "INFO",
    }
    styles = {
        ValidationSeverity.ERROR: format_error,
        ValidationSeverity.WARNING: format_warning,
        ValidationSeverity.INFO: format_info,
    }
    for severity in sorted(ValidationSeverity, reverse=True):
        if severity < min_severity:
            continue
        issues = report.get_issues(severity)
        if not issues:
            continue
        click.echo()
        click.echo(f"{headings[severity]} ({len(issues)}):")
        for issue in issues[:MAX_ISSUES_SHOWN]:
            context_str = ""
            if issue.context:
                ctx_items = ", ".join(f"{k}={v}" for k, v in issue.context.items())
                context_str = f" [{ctx_items}]"
            line = f"  {issue.field}: {issue.message}{context_str}"
            click.echo(styles[severity](line))
        if len(issues) > MAX_ISSUES_SHOWN:
            click.echo(f"  ... and {len(issues) - MAX_ISSUES_SHOWN} more")

    click.echo()
    click.echo("=" * 60)


def finish(ctx: click.Context, report: ValidationReport) -> None:
    """Print the verdict and exit non-zero when the report has errors."""
    click.echo()
    if report.has_errors():
        click.echo(
            format_error(f"Validation failed with {report.error_count} error(s)")
        )
        ctx.exit(EXIT_CONFIGURATION)
    elif report.warning_count:
        click.echo(
            format_warning(
                f"Validation completed with {report.warning_count} warning(s)"
            )
        )
    else:
        click.echo(format_success("Validation passed! No issues found."))


@click.command(name="validate-config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON billing configuration (default: BILLING_CONFIG_FILE or built-in)",
)
@click.option(
    "--severity",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default="info",
    help="Minimum severity level to display (default: info)",
)
@click.pass_context
def validate_config(ctx: click.Context, config_path: Optional[str], severity: str):
    """Validate a billing configuration.

    Checks for:
    - Missing day-type sections
    - Minimum billing without minimum hours
    - Zero rate multipliers and inconsistent rain-day rules
    - Disabled billing categories

    Returns non-zero exit code if errors are found.

    Example:
        eph-billing validate-config --config billing.json
    """
    debug = (ctx.obj or {}).get("debug", False)

    with with_error_handling(debug):
        config, source = load_billing_config(config_path)
        click.echo(format_info(f"Validating billing configuration: {source}"))

        report = BillingConfigValidator().validate(config)
        print_report(report, ValidationSeverity[severity.upper()])
        finish(ctx, report)


@click.command(name="validate-entries")
@click.option(
    "--entries",
    "entries_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="JSON file with raw timesheet entries",
)
@click.option(
    "--severity",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default="warning",
    help="Minimum severity level to display (default: warning)",
)
@click.pass_context
def validate_entries(ctx: click.Context, entries_path: str, severity: str):
    """Validate a set of timesheet entries.

    Checks for:
    - Duplicate submissions that cannot be resolved
    - Unparseable or incomplete time ranges
    - Entries with only subcontractor submissions
    - Total hours disagreeing with the recorded times

    Returns non-zero exit code if errors are found.

    Example:
        eph-billing validate-entries --entries march.json --severity info
    """
    debug = (ctx.obj or {}).get("debug", False)

    with with_error_handling(debug):
        entries = read_raw_entries(entries_path)
        click.echo(format_info(f"Validating {len(entries)} entries..."))

        report = EntrySetValidator().validate(entries)
        print_report(report, ValidationSeverity[severity.upper()])
        finish(ctx, report)
