"""Billing run: the full engine pass for one tenant and reporting period.

This module chains the engine components over an in-memory set of raw
entries and a billing configuration supplied by the caller:

1. Normalize raw submissions into one effective entry per (date, subject)
2. Classify, resolve the policy and calculate each effective entry
3. Aggregate the results into grand totals and, optionally, grouped totals

Each run is a pure, synchronous fold with no shared state, so callers may
run independent passes (for example one per asset) concurrently.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Collection, Dict, Hashable, Iterable, List, Mapping, Optional

from eph_billing.aggregators.hours_aggregator import (
    AggregateTotals,
    KeyFunc,
    aggregate,
    aggregate_by,
)
from eph_billing.calculators.billable_hours_calculator import (
    BillableHoursResult,
    Rate,
    calculate_batch,
)
from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.entry import RawEntry
from eph_billing.normalizers.entry_normalizer import (
    NormalizationResult,
    normalize_with_audit,
)
from eph_billing.utils.logging_utils import (
    LogContext,
    generate_correlation_id,
    get_correlation_id,
    log_function_call,
)

logger = logging.getLogger(__name__)


@dataclass
class BillingRunResult:
    """Everything produced by one billing run.

    Attributes:
        normalization: Effective, superseded and reference-only entries
        results: One BillableHoursResult per effective entry
        totals: Grand totals over all results
        grouped: Totals per grouping key (empty when no key was given)
        run_id: Correlation id used in the run's log records (the enclosing
            LogContext's run_id when there is one)
    """

    normalization: NormalizationResult
    results: List[BillableHoursResult]
    totals: AggregateTotals
    grouped: Dict[Hashable, AggregateTotals] = field(default_factory=dict)
    run_id: Optional[str] = None


@log_function_call
def run_billing(
    raw_entries: Iterable[RawEntry],
    config: BillingConfig,
    rate: Optional[Rate] = None,
    rates: Optional[Mapping[str, Rate]] = None,
    public_holidays: Collection[dt.date] = (),
    group_by: Optional[KeyFunc] = None,
) -> BillingRunResult:
    """Run the billing engine over a set of raw entries.

    Args:
        raw_entries: Raw entries for one tenant and reporting period
        config: Tenant billing configuration (read-only)
        rate: Rate applied to every entry
        rates: Rate per subject_key, overriding ``rate``
        public_holidays: Extra public-holiday dates
        group_by: Optional key function for grouped totals

    Returns:
        BillingRunResult with every intermediate artifact

    Raises:
        AmbiguousEntryError: If a (date, subject) key cannot be resolved
        ConfigurationError: If the config cannot bill an entry
        InvalidTimeRangeError: If an entry's hours cannot be determined

    Example:
        >>> run = run_billing(entries, BillingConfig.default(), rate=450,
        ...                   group_by=by_asset)
        >>> run.totals.read_out()["total_billable_hours"]
        Decimal('164.5')
    """
    # Join the run id of an enclosing LogContext, if any
    run_id = get_correlation_id() or generate_correlation_id()
    entries = list(raw_entries)

    with LogContext(run_id=run_id):
        logger.info(f"Starting billing run over {len(entries)} raw entries")

        normalization = normalize_with_audit(entries)

        results = calculate_batch(
            normalization.effective,
            config,
            rate=rate,
            rates=rates,
            public_holidays=public_holidays,
        )

        totals = aggregate(results)
        grouped = aggregate_by(results, group_by) if group_by is not None else {}

        logger.info(
            f"Billing run complete: {totals.entry_count} entries, "
            f"{totals.total_billable_hours} billable hours"
        )

    return BillingRunResult(
        normalization=normalization,
        results=results,
        totals=totals,
        grouped=grouped,
        run_id=run_id,
    )
