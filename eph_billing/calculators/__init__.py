"""Calculator modules for the billing engine."""

from eph_billing.calculators.billable_hours_calculator import (
    BillableHoursResult,
    calculate,
    calculate_actual_hours,
    calculate_batch,
    calculate_entry,
    calculate_exact_hours,
)
from eph_billing.calculators.policy_resolver import ResolvedPolicy, resolve_policy
from eph_billing.calculators.time_utils import (
    calculate_elapsed_seconds,
    convert_time_to_seconds,
    elapsed_hours,
    parse_clock_time,
    seconds_to_hours,
)

__all__ = [
    # billable_hours_calculator
    "BillableHoursResult",
    "calculate",
    "calculate_actual_hours",
    "calculate_batch",
    "calculate_entry",
    "calculate_exact_hours",
    # policy_resolver
    "ResolvedPolicy",
    "resolve_policy",
    # time_utils
    "calculate_elapsed_seconds",
    "convert_time_to_seconds",
    "elapsed_hours",
    "parse_clock_time",
    "seconds_to_hours",
]
