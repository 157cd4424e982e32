"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import Any, List, Optional, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_cell(value: Any) -> str:
    """Render one table cell.

    Decimals print in fixed-point notation without exponent, missing values
    print as ``-``.

    Example:
        >>> format_cell(Decimal("1E+1"))
        '10'
        >>> format_cell(None)
        '-'
    """
    if value is None:
        return "-"
    if isinstance(value, Decimal):
        return f"{value:f}"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    max_width: int = 80,
    align_right: Optional[Sequence[int]] = None,
) -> str:
    """Format data as a table.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 80)
        align_right: Indexes of columns to right-align (numeric columns)

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    right = set(align_right or ())
    cells = [[format_cell(cell) for cell in row] for row in rows]

    # Calculate column widths
    col_widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(cell))

    # Limit column widths to max_width
    col_widths = [min(w, max_width) for w in col_widths]

    def render(row: List[str]) -> str:
        formatted = []
        for i, cell in enumerate(row[: len(col_widths)]):
            text = cell[: col_widths[i]]  # Truncate if needed
            if i in right:
                formatted.append(f" {text:>{col_widths[i]}} ")
            else:
                formatted.append(f" {text:<{col_widths[i]}} ")
        return "|" + "|".join(formatted) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in col_widths) + "+"

    table_lines = [separator, render(headers), separator]
    if cells:
        table_lines.extend(render(row) for row in cells)
        table_lines.append(separator)

    return "\n".join(table_lines)
