"""CLI utility functions."""

from eph_billing.cli.utils.formatters import (
    format_cell,
    format_error,
    format_info,
    format_success,
    format_table,
    format_warning,
)

__all__ = [
    "format_cell",
    "format_error",
    "format_info",
    "format_success",
    "format_table",
    "format_warning",
]
