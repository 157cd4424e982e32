"""Entry set validator.

Runs the normalizer's selection rules and the calculator's hour checks over
a set of raw entries without raising, so every problem in a reporting
period can be reported at once instead of stopping at the first one.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable

from eph_billing.calculators.billable_hours_calculator import calculate_actual_hours
from eph_billing.errors import AmbiguousEntryError, InvalidTimeRangeError
from eph_billing.models.entry import EntryKey, RawEntry
from eph_billing.normalizers.entry_normalizer import (
    group_entries,
    rank_entry,
    select_entry,
)
from eph_billing.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

# Times and a stored total are compared at display precision
HOURS_TOLERANCE = Decimal("0.05")


def _key_context(key: EntryKey) -> Dict[str, Any]:
    return {"date": key[0].isoformat(), "subject": key[1]}


def _entry_context(entry: RawEntry) -> Dict[str, Any]:
    context = _key_context(entry.key)
    context["role"] = entry.author_role.value
    if entry.id:
        context["id"] = entry.id
    return context


class EntrySetValidator:
    """Validator for the raw entries of one tenant and reporting period.

    Example:
        >>> report = EntrySetValidator().validate(entries)
        >>> for issue in report.get_errors():
        ...     print(issue)
    """

    def validate(self, entries: Iterable[RawEntry]) -> ValidationReport:
        """Validate a set of raw entries.

        Args:
            entries: Raw entries, as passed to the normalizer

        Returns:
            ValidationReport with any issues found
        """
        report = ValidationReport()
        groups = group_entries(entries)

        for key, group in groups.items():
            for entry in group:
                self._validate_hours(entry, report)
                if entry.is_strike_day:
                    report.add_warning(
                        "is_strike_day",
                        "Strike day is recorded but billed like any other day",
                        True,
                        _entry_context(entry),
                    )
            self._validate_selection(key, group, report)

        logger.info(
            f"Validated {sum(len(g) for g in groups.values())} entries "
            f"for {len(groups)} keys: {report.summary()}"
        )
        return report

    def _validate_selection(
        self, key: EntryKey, group: list, report: ValidationReport
    ) -> None:
        eligible = [e for e in group if rank_entry(e) is not None]
        if not eligible:
            report.add_warning(
                "author_role",
                "Only subcontractor entries exist; shown for reference and "
                "not billed",
                len(group),
                _key_context(key),
            )
            return

        try:
            selected = select_entry(key, eligible)
        except AmbiguousEntryError as e:
            report.add_error("entries", e.message, len(e.candidates), _key_context(key))
            return

        for entry in eligible:
            if entry is not selected:
                report.add_info(
                    "entries",
                    f"Superseded by the {selected.author_role.value} entry",
                    entry.id,
                    _entry_context(entry),
                )

    def _validate_hours(self, entry: RawEntry, report: ValidationReport) -> None:
        try:
            actual = calculate_actual_hours(entry)
        except InvalidTimeRangeError as e:
            report.add_error(
                "start_time/end_time", e.message, None, _entry_context(entry)
            )
            return

        if (
            entry.start_time is not None
            and entry.end_time is not None
            and entry.total_hours is not None
            and entry.total_hours.is_finite()
            and abs(actual - entry.total_hours) > HOURS_TOLERANCE
        ):
            report.add_warning(
                "total_hours",
                f"Total hours ({entry.total_hours}) disagree with the "
                f"recorded times ({actual}h); the times are used",
                entry.total_hours,
                _entry_context(entry),
            )
