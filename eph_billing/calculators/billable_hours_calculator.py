"""Billable hours calculator.

This module turns an effective entry and its resolved policy into actual
hours, billable hours and cost:

- PER_HOUR:          billable = actual × multiplier
- MINIMUM_BILLING:   billable = max(actual, min_hours) × multiplier
- RAIN_DAY_MINIMUM:  billable = min_hours if actual < threshold else actual
- BREAKDOWN_ACTUAL:  billable = actual
- BREAKDOWN_ZERO:    billable = 0
- DISABLED_ACTUAL:   billable = actual

Cost = billable × rate when a rate is known. Hours and cost are computed as
exact fractions (a 07:00-07:20 shift is exactly one third of an hour) and
carried on the result for aggregation; the Decimal fields are derived from
them once per entry. Rounding to display precision happens only when
aggregate totals are read out.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Collection, Iterable, List, Mapping, Optional, Union

from eph_billing.calculators.policy_resolver import ResolvedPolicy, resolve_policy
from eph_billing.calculators.time_utils import elapsed_hours
from eph_billing.classifiers.day_classifier import classify
from eph_billing.errors import ConfigurationError, InvalidTimeRangeError
from eph_billing.models.base import fraction_to_decimal, to_decimal
from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.day_type import BillingRule, DayType
from eph_billing.models.entry import AuthorRole, EffectiveEntry, RawEntry

logger = logging.getLogger(__name__)

ZERO = Fraction(0)

Rate = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class BillableHoursResult:
    """Billing outcome for one effective entry.

    Attributes:
        date: Calendar day of the entry
        subject_key: Operator or asset the entry belongs to
        author_role: Role of the author of the selected entry
        classified_as: DayType assigned by the classifier
        day_type: Category the entry was billed under
        actual_hours: Worked hours
        billable_hours: Hours after the billing rule and multiplier
        rate_multiplier: Multiplier used
        applied_rule: Billing rule applied
        minimum_applied: True when a minimum raised the billable hours
        rate: Rate used for cost, if any
        cost: billable_hours × rate, if a rate is known
        is_strike_day: Strike-day flag, carried for reporting
        actual_fraction, billable_fraction, cost_fraction: Exact values the
            Decimal fields were derived from (None for results built by hand)
    """

    date: dt.date
    subject_key: str
    author_role: AuthorRole
    classified_as: DayType
    day_type: DayType
    actual_hours: Decimal
    billable_hours: Decimal
    rate_multiplier: Decimal
    applied_rule: BillingRule
    minimum_applied: bool = False
    rate: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    is_strike_day: bool = False
    operator_name: Optional[str] = None
    asset_id: Optional[str] = None
    asset_type: Optional[str] = None
    notes: Optional[str] = None
    actual_fraction: Optional[Fraction] = field(
        default=None, repr=False, compare=False
    )
    billable_fraction: Optional[Fraction] = field(
        default=None, repr=False, compare=False
    )
    cost_fraction: Optional[Fraction] = field(default=None, repr=False, compare=False)

    @property
    def exact_actual_hours(self) -> Fraction:
        if self.actual_fraction is not None:
            return self.actual_fraction
        return Fraction(self.actual_hours)

    @property
    def exact_billable_hours(self) -> Fraction:
        if self.billable_fraction is not None:
            return self.billable_fraction
        return Fraction(self.billable_hours)

    @property
    def exact_cost(self) -> Optional[Fraction]:
        if self.cost_fraction is not None:
            return self.cost_fraction
        return Fraction(self.cost) if self.cost is not None else None


def _raw(entry: Union[EffectiveEntry, RawEntry]) -> RawEntry:
    return entry.entry if isinstance(entry, EffectiveEntry) else entry


def calculate_exact_hours(entry: Union[EffectiveEntry, RawEntry]) -> Fraction:
    """Calculate worked hours of an entry as an exact fraction.

    Uses the time-in/time-out pair when both are present (a time-out
    earlier than the time-in crosses midnight), otherwise ``total_hours``.
    An entry with neither counts as zero hours.

    Args:
        entry: Entry to measure

    Returns:
        Actual hours, exact

    Raises:
        InvalidTimeRangeError: If only one of the two times is present, a
            time cannot be parsed, or the hours are negative or NaN

    Example:
        >>> calculate_exact_hours(RawEntry(
        ...     date="2024-03-04", subject_key="EX-01", author_role="operator",
        ...     start_time="07:00", end_time="07:20",
        ... ))
        Fraction(1, 3)
    """
    raw = _raw(entry)

    if raw.start_time is not None and raw.end_time is not None:
        return elapsed_hours(raw.start_time, raw.end_time)
    if raw.has_time_range:
        raise InvalidTimeRangeError(
            f"Entry for {raw.subject_key} on {raw.date} has only one of "
            f"start time ({raw.start_time}) and end time ({raw.end_time})",
            recovery_hint="Record both times or a total hours value",
        )
    if raw.total_hours is None:
        return ZERO

    hours = raw.total_hours
    if hours.is_nan() or hours.is_infinite() or hours < 0:
        raise InvalidTimeRangeError(
            f"Entry for {raw.subject_key} on {raw.date} has invalid hours: {hours}"
        )
    return Fraction(hours)


def calculate_actual_hours(entry: Union[EffectiveEntry, RawEntry]) -> Decimal:
    """Calculate worked hours of an entry as a Decimal.

    Same rules as :func:`calculate_exact_hours`; hours that do not terminate
    as a decimal (twenty minutes) are rounded to the Decimal context
    precision.

    Example:
        >>> calculate_actual_hours(RawEntry(
        ...     date="2024-03-04", subject_key="EX-01", author_role="operator",
        ...     start_time="22:00", end_time="06:30",
        ... ))
        Decimal('8.5')
    """
    return fraction_to_decimal(calculate_exact_hours(entry))


def calculate(
    entry: Union[EffectiveEntry, RawEntry],
    policy: ResolvedPolicy,
    rate: Optional[Rate] = None,
    classified_as: Optional[DayType] = None,
) -> BillableHoursResult:
    """Apply a resolved policy to an entry.

    Args:
        entry: Effective entry to bill
        policy: Policy resolved for the entry's day type
        rate: Per-hour rate for cost; a day-type custom rate takes precedence
        classified_as: DayType from the classifier (defaults to the policy's)

    Returns:
        BillableHoursResult for the entry

    Raises:
        InvalidTimeRangeError: If the actual hours cannot be determined

    Example:
        >>> policy = resolve_policy(DayType.SATURDAY, BillingConfig.default())
        >>> saturday = RawEntry(date="2024-03-09", subject_key="EX-01",
        ...                     author_role="operator", total_hours=3)
        >>> calculate(saturday, policy).billable_hours
        Decimal('12')
    """
    raw = _raw(entry)
    actual = calculate_exact_hours(raw)
    multiplier = Fraction(policy.rate_multiplier)
    minimum_applied = False

    if policy.rule == BillingRule.PER_HOUR:
        billable = actual * multiplier
    elif policy.rule == BillingRule.MINIMUM_BILLING:
        floor = Fraction(policy.min_hours) if policy.min_hours is not None else ZERO
        minimum_applied = floor > actual
        billable = max(actual, floor) * multiplier
    elif policy.rule == BillingRule.RAIN_DAY_MINIMUM:
        if actual < Fraction(policy.threshold_hours):
            minimum_applied = True
            billable = Fraction(policy.min_hours)
        else:
            billable = actual
    elif policy.rule in (BillingRule.BREAKDOWN_ACTUAL, BillingRule.DISABLED_ACTUAL):
        billable = actual
    elif policy.rule == BillingRule.BREAKDOWN_ZERO:
        billable = ZERO
    else:
        raise ConfigurationError(f"Unsupported billing rule: {policy.rule}")

    effective_rate = (
        policy.custom_rate if policy.custom_rate is not None else to_decimal(rate)
    )
    cost = billable * Fraction(effective_rate) if effective_rate is not None else None

    return BillableHoursResult(
        date=raw.date,
        subject_key=raw.subject_key,
        author_role=raw.author_role,
        classified_as=classified_as or policy.day_type,
        day_type=policy.day_type,
        actual_hours=fraction_to_decimal(actual),
        billable_hours=fraction_to_decimal(billable),
        rate_multiplier=policy.rate_multiplier,
        applied_rule=policy.rule,
        minimum_applied=minimum_applied,
        rate=effective_rate,
        cost=fraction_to_decimal(cost) if cost is not None else None,
        is_strike_day=raw.is_strike_day,
        operator_name=raw.operator_name,
        asset_id=raw.asset_id,
        asset_type=raw.asset_type,
        notes=raw.notes,
        actual_fraction=actual,
        billable_fraction=billable,
        cost_fraction=cost,
    )


def calculate_entry(
    entry: Union[EffectiveEntry, RawEntry],
    config: BillingConfig,
    rate: Optional[Rate] = None,
    public_holidays: Collection[dt.date] = (),
) -> BillableHoursResult:
    """Classify, resolve and calculate a single entry.

    Raises:
        ConfigurationError: If the config cannot bill the entry's day type
        InvalidTimeRangeError: If the actual hours cannot be determined
    """
    raw = _raw(entry)
    day_type = classify(raw, public_holidays)
    policy = resolve_policy(day_type, config, entry_date=raw.date)
    return calculate(raw, policy, rate=rate, classified_as=day_type)


def calculate_batch(
    entries: Iterable[Union[EffectiveEntry, RawEntry]],
    config: BillingConfig,
    rate: Optional[Rate] = None,
    rates: Optional[Mapping[str, Rate]] = None,
    public_holidays: Collection[dt.date] = (),
) -> List[BillableHoursResult]:
    """Calculate billing for multiple entries with rate lookups.

    Args:
        entries: Effective entries to bill
        config: Tenant billing configuration
        rate: Rate applied to every entry (ignored when ``rates`` is given)
        rates: Rate per subject_key (asset or operator)
        public_holidays: Extra public-holiday dates

    Returns:
        List of BillableHoursResult in the same order as entries

    Raises:
        ConfigurationError: If ``rates`` has no rate for an entry's subject
    """
    results = []

    for entry in entries:
        raw = _raw(entry)
        entry_rate = rate
        if rates is not None:
            try:
                entry_rate = rates[raw.subject_key]
            except KeyError:
                raise ConfigurationError(
                    f"No rate found for '{raw.subject_key}'",
                    recovery_hint="Add the subject to the rate table",
                )
        results.append(calculate_entry(raw, config, entry_rate, public_holidays))

    logger.info(f"Calculated billable hours for {len(results)} entries")
    return results
