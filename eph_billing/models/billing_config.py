"""Billing configuration models.

This module defines the per-tenant billing configuration: one DayTypeConfig
per ordinary day type, the rain-day minimum-billing rule, and the breakdown
switch. The configuration is loaded once per calculation run and passed
explicitly to every call that needs it.
"""

from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import ConfigDict, Field, field_validator

from eph_billing.models.base import BaseDataModel, to_decimal
from eph_billing.models.day_type import BillingMethod, DayType


class DayTypeConfig(BaseDataModel):
    """Billing rule for one ordinary day type.

    Attributes:
        enabled: Whether the rule applies; a disabled day type is billed at
            actual hours with multiplier 1.0
        billing_method: PER_HOUR or MINIMUM_BILLING
        min_hours: Minimum billable hours (required for MINIMUM_BILLING)
        rate_multiplier: Scalar applied to billable hours
        custom_rate: Optional rate overriding the caller's rate for cost

    Example:
        >>> saturday = DayTypeConfig(
        ...     enabled=True,
        ...     billing_method=BillingMethod.MINIMUM_BILLING,
        ...     min_hours=8,
        ...     rate_multiplier=Decimal("1.5"),
        ... )
        >>> saturday.min_hours
        Decimal('8')
    """

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    billing_method: BillingMethod = BillingMethod.PER_HOUR
    min_hours: Optional[Decimal] = Field(None, ge=0)
    rate_multiplier: Decimal = Field(Decimal("1.0"), ge=0)
    custom_rate: Optional[Decimal] = Field(None, ge=0)

    @field_validator("min_hours", "rate_multiplier", "custom_rate", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class RainDayConfig(BaseDataModel):
    """Rain-day minimum billing rule.

    Below ``threshold_hours`` of actual work the day is billed at
    ``min_hours`` flat; at or above it, actual hours are billed.
    """

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    min_hours: Decimal = Field(Decimal("4.5"), ge=0)
    threshold_hours: Decimal = Field(Decimal("1"), ge=0)

    @field_validator("min_hours", "threshold_hours", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class BreakdownConfig(BaseDataModel):
    """Breakdown billing switch: bill actual hours, or bill nothing."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True


DEFAULT_DOCUMENT: Dict[str, Dict[str, Any]] = {
    "weekdays": {
        "enabled": True,
        "billingMethod": "PER_HOUR",
        "minHours": 0,
        "rateMultiplier": "1.0",
    },
    "saturday": {
        "enabled": True,
        "billingMethod": "MINIMUM_BILLING",
        "minHours": 8,
        "rateMultiplier": "1.5",
    },
    "sunday": {
        "enabled": True,
        "billingMethod": "MINIMUM_BILLING",
        "minHours": 8,
        "rateMultiplier": "1.5",
    },
    "publicHolidays": {
        "enabled": True,
        "billingMethod": "MINIMUM_BILLING",
        "minHours": 8,
        "rateMultiplier": "2.0",
    },
    "rainDays": {"enabled": True, "minHours": "4.5", "thresholdHours": 1},
    "breakdown": {"enabled": True},
}

_ORDINARY_FIELDS = {
    DayType.WEEKDAY: "weekdays",
    DayType.SATURDAY: "saturday",
    DayType.SUNDAY: "sunday",
    DayType.PUBLIC_HOLIDAY: "public_holidays",
}


class BillingConfig(BaseDataModel):
    """Tenant billing configuration.

    Ordinary day-type slots may be absent (None); the policy resolver reports
    a ConfigurationError when it needs a missing slot rather than guessing.

    Example:
        >>> config = BillingConfig.default()
        >>> config.for_day_type(DayType.PUBLIC_HOLIDAY).rate_multiplier
        Decimal('2.0')
        >>> config.summary()
        'Weekdays min: 0h • Sat min: 8h • Rain day min: 4.5h • Breakdown: ...'
    """

    model_config = ConfigDict(extra="ignore")

    weekdays: Optional[DayTypeConfig] = None
    saturday: Optional[DayTypeConfig] = None
    sunday: Optional[DayTypeConfig] = None
    public_holidays: Optional[DayTypeConfig] = None
    rain_days: RainDayConfig = Field(default_factory=RainDayConfig)
    breakdown: BreakdownConfig = Field(default_factory=BreakdownConfig)

    @classmethod
    def default(cls) -> "BillingConfig":
        """Configuration used when a tenant has not saved one."""
        return cls.model_validate(DEFAULT_DOCUMENT)

    @classmethod
    def from_document(cls, document: Optional[Mapping[str, Any]]) -> "BillingConfig":
        """Build a configuration from a stored document.

        A tenant without a stored document gets :meth:`default`. A stored
        document is taken as given: missing day-type sections stay None and
        null fields stay null, so the policy resolver reports them instead
        of billing with values the tenant never saved. Only a missing or
        null ``breakdown`` section falls back to "bill actual hours".

        Args:
            document: Stored configuration (camelCase or snake_case keys),
                or None when the tenant has not saved one

        Returns:
            BillingConfig

        Raises:
            pydantic.ValidationError: If a value has the wrong type
        """
        if document is None:
            return cls.default()

        stored = dict(document)
        if stored.get("breakdown") is None:
            stored.pop("breakdown", None)
        return cls.model_validate(stored)

    def for_day_type(self, day_type: DayType) -> Optional[DayTypeConfig]:
        """Return the DayTypeConfig slot of an ordinary day type.

        Raises:
            ValueError: If the day type is not an ordinary one
        """
        try:
            field_name = _ORDINARY_FIELDS[day_type]
        except KeyError:
            raise ValueError(f"{day_type.value} has no DayTypeConfig")
        return getattr(self, field_name)

    def with_billing_method(self, method: BillingMethod) -> "BillingConfig":
        """Return a copy applying one billing method to every ordinary day type."""
        updates = {}
        for field_name in _ORDINARY_FIELDS.values():
            slot = getattr(self, field_name)
            if slot is not None:
                updates[field_name] = slot.model_copy(update={"billing_method": method})
        return self.model_copy(update=updates)

    def summary(self) -> str:
        """One-line summary of the machine-hours rules."""
        weekday_min = self.weekdays.min_hours if self.weekdays else None
        saturday_min = self.saturday.min_hours if self.saturday else None
        parts = [
            f"Weekdays min: {_fmt(weekday_min)}h",
            f"Sat min: {_fmt(saturday_min)}h",
            f"Rain day min: {_fmt(self.rain_days.min_hours)}h",
            f"Breakdown: {'bill actual' if self.breakdown.enabled else 'not billed'}",
        ]
        return " • ".join(parts)


def _fmt(value: Optional[Decimal]) -> str:
    if value is None:
        return "0"
    return f"{value.normalize():f}"
