"""EPH billing engine.

Resolves multi-authored equipment/plant-hours timesheet submissions into
one effective entry per subject and day, and bills them under a tenant's
day-type billing configuration.
"""

__version__ = "1.0.0"

from eph_billing.aggregators.billing_run import BillingRunResult, run_billing
from eph_billing.errors import (
    AmbiguousEntryError,
    BillingEngineError,
    ConfigurationError,
    InvalidTimeRangeError,
)
from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.day_type import DayType
from eph_billing.models.entry import EffectiveEntry, RawEntry

__all__ = [
    "__version__",
    "AmbiguousEntryError",
    "BillingConfig",
    "BillingEngineError",
    "BillingRunResult",
    "ConfigurationError",
    "DayType",
    "EffectiveEntry",
    "InvalidTimeRangeError",
    "RawEntry",
    "run_billing",
]
