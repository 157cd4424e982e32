"""Error handling for CLI commands.

Maps billing engine errors to exit codes and user-friendly messages:

==========================  =========
Error                       Exit code
==========================  =========
ConfigurationError          1
AmbiguousEntryError         2
InvalidTimeRangeError       3
Invalid input documents     4
Missing input file          5
Cancelled by user           130
Anything else               255
==========================  =========
"""

import sys
import traceback

import click
from pydantic import ValidationError

from eph_billing.cli.utils.formatters import format_error, format_warning
from eph_billing.errors import (
    AmbiguousEntryError,
    BillingEngineError,
    ConfigurationError,
    InvalidTimeRangeError,
)

EXIT_CONFIGURATION = 1
EXIT_AMBIGUOUS_ENTRY = 2
EXIT_INVALID_TIME_RANGE = 3
EXIT_DATA_VALIDATION = 4
EXIT_FILE_NOT_FOUND = 5
EXIT_ABORTED = 130
EXIT_UNEXPECTED = 255


def _echo_engine_error(title: str, error: BillingEngineError) -> None:
    click.echo(format_error(f"{title}: {error.message}"))
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code for the error type
    """
    if isinstance(error, ConfigurationError):
        _echo_engine_error("Configuration Error", error)
        return EXIT_CONFIGURATION

    elif isinstance(error, AmbiguousEntryError):
        _echo_engine_error("Ambiguous Entries", error)
        for candidate in error.candidates:
            submitted = getattr(candidate, "submitted_at", None) or "no timestamp"
            click.echo(
                f"  - {getattr(candidate, 'id', None) or '(no id)'} "
                f"submitted {submitted}"
            )
        return EXIT_AMBIGUOUS_ENTRY

    elif isinstance(error, InvalidTimeRangeError):
        _echo_engine_error("Invalid Time Range", error)
        return EXIT_INVALID_TIME_RANGE

    elif isinstance(error, ValidationError):
        click.echo(
            format_error(f"Data Validation Error: {error.error_count()} issue(s)")
        )
        for detail in error.errors():
            location = ".".join(str(part) for part in detail["loc"]) or "document"
            click.echo(f"  - {location}: {detail['msg']}")
        return EXIT_DATA_VALIDATION

    elif isinstance(error, ValueError):
        click.echo(format_error(f"Data Validation Error: {error}"))
        return EXIT_DATA_VALIDATION

    elif isinstance(error, FileNotFoundError):
        click.echo(format_error(f"File Not Found: {error.filename or error}"))
        click.echo(format_warning("Hint: Check the path passed to --entries/--config"))
        return EXIT_FILE_NOT_FOUND

    # Handle click.Abort (user cancellation)
    elif isinstance(error, (click.Abort, KeyboardInterrupt)):
        click.echo(format_warning("\nOperation cancelled by user"))
        return EXIT_ABORTED  # Standard exit code for SIGINT

    # Handle generic exceptions
    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(
                    traceback.format_exception(
                        type(error), error, error.__traceback__
                    )
                )
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return EXIT_UNEXPECTED


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that exits the process with the mapped exit code

    Example:
        @click.command()
        @click.pass_context
        def my_command(ctx):
            with with_error_handling(ctx.obj["debug"]):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Deliberate exits (ctx.exit, sys.exit) pass through unchanged
            if exc_val is None or isinstance(
                exc_val, (SystemExit, click.exceptions.Exit)
            ):
                return False
            exit_code = handle_cli_error(exc_val, self.show_debug)
            sys.exit(exit_code)

    return ErrorHandler(debug)
