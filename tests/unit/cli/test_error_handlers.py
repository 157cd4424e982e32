"""Unit tests for CLI error handling."""

import datetime as dt

import click
import pytest
from pydantic import ValidationError

from eph_billing.cli.error_handlers import (
    EXIT_ABORTED,
    EXIT_AMBIGUOUS_ENTRY,
    EXIT_CONFIGURATION,
    EXIT_DATA_VALIDATION,
    EXIT_FILE_NOT_FOUND,
    EXIT_INVALID_TIME_RANGE,
    EXIT_UNEXPECTED,
    handle_cli_error,
    with_error_handling,
)
from eph_billing.errors import (
    AmbiguousEntryError,
    ConfigurationError,
    InvalidTimeRangeError,
)
from eph_billing.models import RawEntry


class TestHandleCliError:
    """Test mapping errors to exit codes and messages."""

    def test_configuration_error(self, capsys):
        code = handle_cli_error(
            ConfigurationError("No sunday config", recovery_hint="Add it")
        )

        out = capsys.readouterr().out
        assert code == EXIT_CONFIGURATION
        assert "Configuration Error: No sunday config" in out
        assert "Hint: Add it" in out

    def test_ambiguous_entry_lists_candidates(self, capsys):
        candidates = [
            RawEntry(
                id="a",
                date=dt.date(2024, 3, 4),
                subject_key="EX-01",
                author_role="admin",
                submitted_at=dt.datetime(2024, 3, 4, 17, 0),
            ),
            RawEntry(
                date=dt.date(2024, 3, 4), subject_key="EX-01", author_role="admin"
            ),
        ]

        code = handle_cli_error(
            AmbiguousEntryError("Two admin entries", candidates=candidates)
        )

        out = capsys.readouterr().out
        assert code == EXIT_AMBIGUOUS_ENTRY
        assert "  - a submitted 2024-03-04 17:00:00" in out
        assert "  - (no id) submitted no timestamp" in out

    def test_invalid_time_range(self):
        assert (
            handle_cli_error(InvalidTimeRangeError("bad"))
            == EXIT_INVALID_TIME_RANGE
        )

    def test_pydantic_validation_error(self, capsys):
        with pytest.raises(ValidationError) as exc_info:
            RawEntry.model_validate({"date": "2024-03-04", "subjectKey": "EX-01"})

        code = handle_cli_error(exc_info.value)

        out = capsys.readouterr().out
        assert code == EXIT_DATA_VALIDATION
        assert "1 issue(s)" in out
        assert "authorRole" in out

    def test_value_error(self):
        assert handle_cli_error(ValueError("not JSON")) == EXIT_DATA_VALIDATION

    def test_file_not_found(self, capsys):
        error = FileNotFoundError(2, "No such file", "entries.json")

        assert handle_cli_error(error) == EXIT_FILE_NOT_FOUND
        assert "File Not Found: entries.json" in capsys.readouterr().out

    def test_abort(self):
        assert handle_cli_error(click.Abort()) == EXIT_ABORTED
        assert handle_cli_error(KeyboardInterrupt()) == EXIT_ABORTED

    def test_unexpected_error(self, capsys):
        code = handle_cli_error(RuntimeError("boom"))

        out = capsys.readouterr().out
        assert code == EXIT_UNEXPECTED
        assert "Unexpected Error: RuntimeError" in out
        assert "--debug" in out

    def test_unexpected_error_debug_shows_trace(self, capsys):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        assert "Full stack trace" in capsys.readouterr().out


class TestWithErrorHandling:
    """Test the error handling context manager."""

    def test_no_error(self):
        with with_error_handling():
            value = 1
        assert value == 1

    def test_error_exits_with_code(self):
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise InvalidTimeRangeError("bad")

        assert exc_info.value.code == EXIT_INVALID_TIME_RANGE

    def test_system_exit_passes_through(self):
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise SystemExit(7)

        assert exc_info.value.code == 7
