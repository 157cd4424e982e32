"""Billing categories.

The day taxonomy is a closed set: four ordinary calendar categories that
each carry their own :class:`~eph_billing.models.billing_config.DayTypeConfig`,
plus the two condition categories (rain day, breakdown) with dedicated
configuration blocks.
"""

from enum import Enum


class DayType(str, Enum):
    """Billing-relevant classification of a day."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    PUBLIC_HOLIDAY = "public_holiday"
    RAIN_DAY = "rain_day"
    BREAKDOWN = "breakdown"

    @property
    def is_ordinary(self) -> bool:
        """True for the categories configured through a DayTypeConfig."""
        return self in ORDINARY_DAY_TYPES

    @property
    def label(self) -> str:
        return _LABELS[self]


ORDINARY_DAY_TYPES = (
    DayType.WEEKDAY,
    DayType.SATURDAY,
    DayType.SUNDAY,
    DayType.PUBLIC_HOLIDAY,
)

_LABELS = {
    DayType.WEEKDAY: "Normal",
    DayType.SATURDAY: "Saturday",
    DayType.SUNDAY: "Sunday",
    DayType.PUBLIC_HOLIDAY: "Public Holiday",
    DayType.RAIN_DAY: "Rain Day",
    DayType.BREAKDOWN: "Breakdown",
}


class BillingMethod(str, Enum):
    """Billing method of an ordinary day type."""

    PER_HOUR = "PER_HOUR"
    MINIMUM_BILLING = "MINIMUM_BILLING"


class BillingRule(str, Enum):
    """The concrete rule the calculator applies to an entry."""

    PER_HOUR = "per_hour"
    MINIMUM_BILLING = "minimum_billing"
    RAIN_DAY_MINIMUM = "rain_day_minimum"
    BREAKDOWN_ACTUAL = "breakdown_actual"
    BREAKDOWN_ZERO = "breakdown_zero"
    DISABLED_ACTUAL = "disabled_actual"
