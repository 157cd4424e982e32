"""Data models for the billing engine.

This package contains Pydantic models for all engine entities:
- BaseDataModel: Base class with common configuration
- RawEntry / EffectiveEntry: Submitted and selected timesheet records
- DayType, BillingMethod, BillingRule: Billing categories and rules
- DayTypeConfig, RainDayConfig, BreakdownConfig, BillingConfig: Tenant
  billing configuration
"""

from eph_billing.models.base import BaseDataModel
from eph_billing.models.billing_config import (
    BillingConfig,
    BreakdownConfig,
    DayTypeConfig,
    RainDayConfig,
)
from eph_billing.models.day_type import (
    ORDINARY_DAY_TYPES,
    BillingMethod,
    BillingRule,
    DayType,
)
from eph_billing.models.entry import AuthorRole, EffectiveEntry, EntryKey, RawEntry

__all__ = [
    "BaseDataModel",
    "AuthorRole",
    "EffectiveEntry",
    "EntryKey",
    "RawEntry",
    "BillingMethod",
    "BillingRule",
    "DayType",
    "ORDINARY_DAY_TYPES",
    "BillingConfig",
    "BreakdownConfig",
    "DayTypeConfig",
    "RainDayConfig",
]
