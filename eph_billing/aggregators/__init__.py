"""Aggregators module for combining billing results.

This module folds per-entry billing results into day-type buckets and
reporting dimensions, and runs complete billing passes.
"""

from eph_billing.aggregators.billing_run import BillingRunResult, run_billing
from eph_billing.aggregators.hours_aggregator import (
    KEY_FUNCTIONS,
    AggregateTotals,
    HoursAccumulator,
    HoursBucket,
    aggregate,
    aggregate_by,
    by_asset,
    by_asset_type,
    by_month,
    by_operator,
    by_subject,
    by_week,
    filter_by_date_range,
    round_currency,
    round_hours,
    totals_frame,
)

__all__ = [
    "BillingRunResult",
    "run_billing",
    "KEY_FUNCTIONS",
    "AggregateTotals",
    "HoursAccumulator",
    "HoursBucket",
    "aggregate",
    "aggregate_by",
    "by_asset",
    "by_asset_type",
    "by_month",
    "by_operator",
    "by_subject",
    "by_week",
    "filter_by_date_range",
    "round_currency",
    "round_hours",
    "totals_frame",
]
