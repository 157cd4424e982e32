"""Hours aggregator for billing results.

Folds BillableHoursResults into one bucket per DayType plus grand totals,
either for all results or grouped by a caller-supplied key function (per
asset, per operator, per ISO week, ...). Hours and cost are accumulated as
exact fractions, so totals do not depend on input order. Rounding to display
precision (hours to one decimal, currency to two) happens only when totals
are read out.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional

import pandas as pd

from eph_billing.calculators.billable_hours_calculator import BillableHoursResult
from eph_billing.models.base import fraction_to_decimal
from eph_billing.models.day_type import DayType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
EXACT_ZERO = Fraction(0)

HOURS_DECIMAL_PLACES = 1
CURRENCY_DECIMAL_PLACES = 2

KeyFunc = Callable[[BillableHoursResult], Hashable]


def round_hours(value: Decimal, places: int = HOURS_DECIMAL_PLACES) -> Decimal:
    """Round hours for display.

    Example:
        >>> round_hours(Decimal("7.25"))
        Decimal('7.3')
    """
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_currency(value: Decimal, places: int = CURRENCY_DECIMAL_PLACES) -> Decimal:
    """Round a monetary amount for display.

    Example:
        >>> round_currency(Decimal("1234.565"))
        Decimal('1234.57')
    """
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class HoursBucket:
    """Totals for one DayType.

    Attributes:
        actual_hours: Sum of actual hours
        billable_hours: Sum of billable hours
        cost: Sum of costs (entries without a rate contribute nothing)
        entry_count: Number of results in the bucket
    """

    actual_hours: Decimal = ZERO
    billable_hours: Decimal = ZERO
    cost: Decimal = ZERO
    entry_count: int = 0


EMPTY_BUCKET = HoursBucket()


@dataclass(frozen=True)
class AggregateTotals:
    """Aggregated hours and cost for one grouping key.

    Attributes:
        buckets: Totals per DayType (read-only)
        total_actual_hours: Sum of actual hours over all buckets
        total_billable_hours: Sum of billable hours over all buckets
        total_cost: Sum of costs over all buckets
        entry_count: Number of results aggregated

    Example:
        >>> totals = aggregate(results)
        >>> totals.bucket(DayType.SATURDAY).billable_hours
        Decimal('12.0')
        >>> totals.read_out()["total_billable_hours"]
        Decimal('21.0')
    """

    buckets: Mapping[DayType, HoursBucket]
    total_actual_hours: Decimal = ZERO
    total_billable_hours: Decimal = ZERO
    total_cost: Decimal = ZERO
    entry_count: int = 0

    def bucket(self, day_type: DayType) -> HoursBucket:
        """Totals of one DayType (an empty bucket when nothing was billed)."""
        return self.buckets.get(day_type, EMPTY_BUCKET)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregateTotals):
            return NotImplemented
        return (
            all(self.bucket(t) == other.bucket(t) for t in DayType)
            and self.total_actual_hours == other.total_actual_hours
            and self.total_billable_hours == other.total_billable_hours
            and self.total_cost == other.total_cost
            and self.entry_count == other.entry_count
        )

    def read_out(
        self,
        hours_places: int = HOURS_DECIMAL_PLACES,
        currency_places: int = CURRENCY_DECIMAL_PLACES,
    ) -> Dict[str, Any]:
        """Rounded totals for display.

        Returns:
            Dictionary with ``actual_<day_type>_hours`` and
            ``billable_<day_type>_hours`` for every DayType, the grand totals
            and the entry count
        """
        values: Dict[str, Any] = {}
        for day_type in DayType:
            bucket = self.bucket(day_type)
            values[f"actual_{day_type.value}_hours"] = round_hours(
                bucket.actual_hours, hours_places
            )
            values[f"billable_{day_type.value}_hours"] = round_hours(
                bucket.billable_hours, hours_places
            )
        values["total_actual_hours"] = round_hours(
            self.total_actual_hours, hours_places
        )
        values["total_billable_hours"] = round_hours(
            self.total_billable_hours, hours_places
        )
        values["total_cost"] = round_currency(self.total_cost, currency_places)
        values["entry_count"] = self.entry_count
        return values


@dataclass
class HoursAccumulator:
    """Mutable fold state; call :meth:`build` to obtain AggregateTotals.

    Sums are kept as exact fractions and converted to Decimal once, in
    :meth:`build`.
    """

    actual: Dict[DayType, Fraction] = field(default_factory=dict)
    billable: Dict[DayType, Fraction] = field(default_factory=dict)
    cost: Dict[DayType, Fraction] = field(default_factory=dict)
    counts: Dict[DayType, int] = field(default_factory=dict)

    def add(self, result: BillableHoursResult) -> "HoursAccumulator":
        day_type = result.day_type
        self.actual[day_type] = (
            self.actual.get(day_type, EXACT_ZERO) + result.exact_actual_hours
        )
        self.billable[day_type] = (
            self.billable.get(day_type, EXACT_ZERO) + result.exact_billable_hours
        )
        cost = result.exact_cost
        if cost is not None:
            self.cost[day_type] = self.cost.get(day_type, EXACT_ZERO) + cost
        self.counts[day_type] = self.counts.get(day_type, 0) + 1
        return self

    def build(self) -> AggregateTotals:
        buckets = {
            day_type: HoursBucket(
                actual_hours=fraction_to_decimal(self.actual[day_type]),
                billable_hours=fraction_to_decimal(self.billable[day_type]),
                cost=fraction_to_decimal(self.cost.get(day_type, EXACT_ZERO)),
                entry_count=self.counts[day_type],
            )
            for day_type in DayType
            if day_type in self.counts
        }
        return AggregateTotals(
            buckets=MappingProxyType(buckets),
            total_actual_hours=_exact_sum(self.actual),
            total_billable_hours=_exact_sum(self.billable),
            total_cost=_exact_sum(self.cost),
            entry_count=sum(self.counts.values()),
        )


def _exact_sum(values: Mapping[DayType, Fraction]) -> Decimal:
    return fraction_to_decimal(sum(values.values(), EXACT_ZERO))


def aggregate(results: Iterable[BillableHoursResult]) -> AggregateTotals:
    """Aggregate billing results into a single set of totals.

    Args:
        results: Results to fold

    Returns:
        AggregateTotals over all results
    """
    accumulator = HoursAccumulator()
    for result in results:
        accumulator.add(result)
    return accumulator.build()


def aggregate_by(
    results: Iterable[BillableHoursResult], key_func: KeyFunc
) -> Dict[Hashable, AggregateTotals]:
    """Aggregate billing results per grouping key.

    Args:
        results: Results to fold
        key_func: Maps a result to its grouping key, e.g. :func:`by_asset`

    Returns:
        Dictionary of AggregateTotals per key, keys in sorted order
    """
    accumulators: Dict[Hashable, HoursAccumulator] = {}
    for result in results:
        key = key_func(result)
        accumulators.setdefault(key, HoursAccumulator()).add(result)

    grouped = {
        key: accumulators[key].build() for key in sorted(accumulators, key=_sort_key)
    }
    logger.info(f"Aggregated results into {len(grouped)} groups")
    return grouped


def _sort_key(key: Hashable):
    return (key is None, str(key))


def by_subject(result: BillableHoursResult) -> str:
    return result.subject_key


def by_asset(result: BillableHoursResult) -> str:
    """Asset id, falling back to the subject key."""
    return result.asset_id or result.subject_key


def by_operator(result: BillableHoursResult) -> str:
    """Operator name, falling back to the subject key."""
    return result.operator_name or result.subject_key


def by_asset_type(result: BillableHoursResult) -> str:
    return result.asset_type or "Unknown"


def by_week(result: BillableHoursResult) -> str:
    """ISO week label in format "YYYY-W##"."""
    iso_year, iso_week, _ = result.date.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def by_month(result: BillableHoursResult) -> str:
    return f"{result.date.year}-{result.date.month:02d}"


KEY_FUNCTIONS: Dict[str, KeyFunc] = {
    "subject": by_subject,
    "asset": by_asset,
    "operator": by_operator,
    "asset-type": by_asset_type,
    "week": by_week,
    "month": by_month,
}


def filter_by_date_range(
    results: Iterable[BillableHoursResult],
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
) -> List[BillableHoursResult]:
    """Keep results dated within [start_date, end_date] (open ends allowed)."""
    filtered = [
        r
        for r in results
        if (start_date is None or r.date >= start_date)
        and (end_date is None or r.date <= end_date)
    ]
    logger.info(
        f"Filtered by date range {start_date} to {end_date}: "
        f"{len(filtered)} results"
    )
    return filtered


def totals_frame(
    grouped: Mapping[Hashable, AggregateTotals],
    hours_places: int = HOURS_DECIMAL_PLACES,
    currency_places: int = CURRENCY_DECIMAL_PLACES,
) -> pd.DataFrame:
    """Render grouped totals as a DataFrame of rounded read-out values.

    Args:
        grouped: Totals per key, as returned by :func:`aggregate_by`
        hours_places: Decimal places for hours
        currency_places: Decimal places for cost

    Returns:
        DataFrame with one row per key and one column per read-out value
    """
    if not grouped:
        logger.info("No grouped totals, returning empty DataFrame")
        return pd.DataFrame()

    rows = {
        str(key): totals.read_out(hours_places, currency_places)
        for key, totals in grouped.items()
    }
    df = pd.DataFrame.from_dict(rows, orient="index")
    df.index.name = "group"
    return df
