"""Policy resolver.

Maps a DayType and the tenant BillingConfig to the concrete billing rule
for an entry:

- Breakdown: actual hours at multiplier 1.0 when enabled, nothing when
  disabled. Minimum billing and multipliers never apply.
- Rain day: flat minimum below the threshold, actual hours at or above it.
  A disabled rain-day rule falls through to the calendar day's policy.
- Weekday / Saturday / Sunday / public holiday: the matching DayTypeConfig.
  A disabled day type is billed at actual hours with multiplier 1.0.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from eph_billing.classifiers.day_classifier import calendar_day_type
from eph_billing.errors import ConfigurationError
from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.day_type import BillingMethod, BillingRule, DayType

logger = logging.getLogger(__name__)

ONE = Decimal("1.0")


@dataclass(frozen=True)
class ResolvedPolicy:
    """Billing rule resolved for one day type.

    Attributes:
        day_type: Category the entry is billed under (differs from the
            classified type when a disabled rain-day rule falls through)
        enabled: Whether the configured rule is active
        rule: Concrete rule applied by the calculator
        rate_multiplier: Multiplier applied to billable hours
        billing_method: Configured method for ordinary day types
        min_hours: Minimum hours for minimum-billing and rain-day rules
        threshold_hours: Rain-day productivity threshold
        custom_rate: Day-type rate overriding the caller's rate
    """

    day_type: DayType
    enabled: bool
    rule: BillingRule
    rate_multiplier: Decimal = ONE
    billing_method: Optional[BillingMethod] = None
    min_hours: Optional[Decimal] = None
    threshold_hours: Optional[Decimal] = None
    custom_rate: Optional[Decimal] = None


def resolve_policy(
    day_type: DayType,
    config: BillingConfig,
    entry_date: Optional[dt.date] = None,
) -> ResolvedPolicy:
    """Resolve the billing policy for a day type.

    Args:
        day_type: Classified day type of the entry
        config: Tenant billing configuration
        entry_date: Calendar date of the entry; required when a rain day
            falls through to the calendar day's policy

    Returns:
        ResolvedPolicy for the calculator

    Raises:
        ConfigurationError: If a needed DayTypeConfig is missing, a
            minimum-billing config has no minimum hours, or a disabled rain
            day cannot fall through because the date is unknown

    Example:
        >>> policy = resolve_policy(DayType.SATURDAY, BillingConfig.default())
        >>> policy.rule, policy.min_hours, policy.rate_multiplier
        (<BillingRule.MINIMUM_BILLING: 'minimum_billing'>, Decimal('8'), Decimal('1.5'))
    """
    if day_type == DayType.BREAKDOWN:
        if config.breakdown.enabled:
            return ResolvedPolicy(
                day_type=day_type, enabled=True, rule=BillingRule.BREAKDOWN_ACTUAL
            )
        return ResolvedPolicy(
            day_type=day_type,
            enabled=False,
            rule=BillingRule.BREAKDOWN_ZERO,
        )

    if day_type == DayType.RAIN_DAY:
        rain = config.rain_days
        if rain.enabled:
            return ResolvedPolicy(
                day_type=day_type,
                enabled=True,
                rule=BillingRule.RAIN_DAY_MINIMUM,
                min_hours=rain.min_hours,
                threshold_hours=rain.threshold_hours,
            )
        if entry_date is None:
            raise ConfigurationError(
                "Rain-day billing is disabled and no date was given to fall "
                "through to the calendar day's policy",
                recovery_hint="Pass entry_date when resolving rain-day policies",
            )
        fallback = calendar_day_type(entry_date)
        logger.debug(
            f"Rain-day billing disabled; {entry_date} billed as {fallback.value}"
        )
        return _resolve_ordinary(fallback, config)

    return _resolve_ordinary(day_type, config)


def _resolve_ordinary(day_type: DayType, config: BillingConfig) -> ResolvedPolicy:
    day_config = config.for_day_type(day_type)
    if day_config is None:
        raise ConfigurationError(
            f"No billing configuration for {day_type.label} entries",
            recovery_hint=f"Add a '{day_type.value}' section to the billing config",
        )

    if not day_config.enabled:
        return ResolvedPolicy(
            day_type=day_type,
            enabled=False,
            rule=BillingRule.DISABLED_ACTUAL,
            billing_method=day_config.billing_method,
            custom_rate=day_config.custom_rate,
        )

    if day_config.billing_method == BillingMethod.MINIMUM_BILLING:
        if day_config.min_hours is None:
            raise ConfigurationError(
                f"{day_type.label} uses minimum billing but has no minimum hours",
                recovery_hint="Set minHours or switch the day type to PER_HOUR",
            )
        return ResolvedPolicy(
            day_type=day_type,
            enabled=True,
            rule=BillingRule.MINIMUM_BILLING,
            rate_multiplier=day_config.rate_multiplier,
            billing_method=BillingMethod.MINIMUM_BILLING,
            min_hours=day_config.min_hours,
            custom_rate=day_config.custom_rate,
        )

    return ResolvedPolicy(
        day_type=day_type,
        enabled=True,
        rule=BillingRule.PER_HOUR,
        rate_multiplier=day_config.rate_multiplier,
        billing_method=BillingMethod.PER_HOUR,
        custom_rate=day_config.custom_rate,
    )
