"""Calculate billable hours command."""

from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import click

from eph_billing.aggregators.billing_run import run_billing
from eph_billing.aggregators.hours_aggregator import (
    KEY_FUNCTIONS,
    AggregateTotals,
    aggregate,
    aggregate_by,
    filter_by_date_range,
    round_currency,
    round_hours,
    totals_frame,
)
from eph_billing.calculators.billable_hours_calculator import BillableHoursResult
from eph_billing.cli.error_handlers import with_error_handling
from eph_billing.cli.utils.formatters import (
    format_info,
    format_success,
    format_table,
    format_warning,
)
from eph_billing.cli.utils.options import load_billing_config, parse_decimal, to_dates
from eph_billing.config.settings import get_config
from eph_billing.models.base import to_decimal
from eph_billing.models.day_type import DayType
from eph_billing.readers.json_reader import load_document, read_raw_entries

GROUP_BY_CHOICES = ["none", *KEY_FUNCTIONS]


def load_rates(path: str) -> Dict[str, Decimal]:
    """Read a ``{subject_key: rate}`` JSON object."""
    document = load_document(path)
    if not isinstance(document, dict):
        raise ValueError(f"{path} must map subject keys to rates")
    return {str(key): to_decimal(value) for key, value in document.items()}


def _has_cost(results) -> bool:
    return any(result.cost is not None for result in results)


def _entry_rows(
    results: List[BillableHoursResult], hours_places: int, currency_places: int
) -> List[list]:
    rows = []
    for r in results:
        billed_as = r.day_type.label
        if r.classified_as != r.day_type:
            billed_as = f"{billed_as} ({r.classified_as.label})"
        rows.append(
            [
                r.date.isoformat(),
                r.subject_key,
                r.author_role.value,
                billed_as,
                round_hours(r.actual_hours, hours_places),
                round_hours(r.billable_hours, hours_places),
                r.rate_multiplier,
                "yes" if r.minimum_applied else "",
                round_currency(r.cost, currency_places) if r.cost is not None else None,
            ]
        )
    return rows


def _bucket_rows(totals: AggregateTotals, hours_places: int) -> List[list]:
    rows = []
    for day_type in DayType:
        bucket = totals.bucket(day_type)
        if bucket.entry_count:
            rows.append(
                [
                    day_type.label,
                    bucket.entry_count,
                    round_hours(bucket.actual_hours, hours_places),
                    round_hours(bucket.billable_hours, hours_places),
                ]
            )
    return rows


@click.command(name="calculate")
@click.option(
    "--entries",
    "entries_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="JSON file with raw timesheet entries",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON billing configuration (default: BILLING_CONFIG_FILE or built-in)",
)
@click.option(
    "--rate",
    type=str,
    default=None,
    callback=parse_decimal,
    help="Hourly rate applied to every entry",
)
@click.option(
    "--rates",
    "rates_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON file mapping subject keys to hourly rates (overrides --rate)",
)
@click.option(
    "--group-by",
    type=click.Choice(GROUP_BY_CHOICES, case_sensitive=False),
    default="none",
    help="Dimension for grouped totals (default: none)",
)
@click.option(
    "--from",
    "start_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="First date to include (YYYY-MM-DD)",
)
@click.option(
    "--to",
    "end_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Last date to include (YYYY-MM-DD)",
)
@click.option(
    "--public-holiday",
    "public_holidays",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    multiple=True,
    help="Public holiday date (YYYY-MM-DD); repeat for several dates",
)
@click.option(
    "--csv",
    "csv_path",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the totals as CSV to this file",
)
@click.pass_context
def calculate_hours(
    ctx: click.Context,
    entries_path: str,
    config_path: Optional[str],
    rate: Optional[Decimal],
    rates_path: Optional[str],
    group_by: str,
    start_date,
    end_date,
    public_holidays: Tuple,
    csv_path: Optional[str],
):
    """Calculate billable hours and cost for a set of timesheet entries.

    Duplicate submissions are resolved to one entry per date and subject,
    each entry is classified and billed under the tenant's configuration,
    and the totals are printed per day type.

    Example:
        eph-billing calculate --entries march.json --config billing.json
        eph-billing calculate --entries march.json --rate 450 --group-by asset
        eph-billing calculate --entries march.json --from 2024-03-01 \\
            --to 2024-03-15 --public-holiday 2024-03-21 --csv totals.csv
    """
    debug = (ctx.obj or {}).get("debug", False)

    with with_error_handling(debug):
        settings = get_config()
        hours_places = settings.hours_decimal_places
        currency_places = settings.currency_decimal_places

        config, config_source = load_billing_config(config_path)
        click.echo(format_info(f"Billing configuration: {config_source}"))
        click.echo(format_info(f"  {config.summary()}"))

        entries = read_raw_entries(entries_path)
        rates = load_rates(rates_path) if rates_path else None

        run = run_billing(
            entries,
            config,
            rate=rate,
            rates=rates,
            public_holidays=to_dates(public_holidays),
        )

        results = run.results
        if start_date or end_date:
            results = filter_by_date_range(
                results,
                start_date.date() if start_date else None,
                end_date.date() if end_date else None,
            )
        totals = aggregate(results)

        normalization = run.normalization
        click.echo(
            format_info(
                f"{len(entries)} raw entries → {len(normalization.effective)} "
                f"effective ({len(normalization.superseded)} superseded)"
            )
        )
        for key in normalization.reference_only:
            click.echo(
                format_warning(
                    f"{key[1]} on {key[0].isoformat()}: subcontractor entries "
                    "only, not billed"
                )
            )

        if not results:
            click.echo(format_warning("No entries to bill in the selected period"))
            return

        click.echo()
        click.echo(
            format_table(
                [
                    "Date",
                    "Subject",
                    "Author",
                    "Billed as",
                    "Actual",
                    "Billable",
                    "Multiplier",
                    "Minimum",
                    "Cost",
                ],
                _entry_rows(results, hours_places, currency_places),
                align_right=[4, 5, 6, 8],
            )
        )

        click.echo()
        click.echo(
            format_table(
                ["Day type", "Entries", "Actual", "Billable"],
                _bucket_rows(totals, hours_places),
                align_right=[1, 2, 3],
            )
        )

        read_out = totals.read_out(hours_places, currency_places)
        click.echo()
        click.echo(f"Total actual hours:   {read_out['total_actual_hours']}")
        click.echo(f"Total billable hours: {read_out['total_billable_hours']}")
        if rate is not None or rates is not None or _has_cost(results):
            click.echo(f"Total cost:           {read_out['total_cost']}")

        if group_by != "none":
            grouped = aggregate_by(results, KEY_FUNCTIONS[group_by.lower()])
        else:
            grouped = {"all": totals}

        frame = totals_frame(grouped, hours_places, currency_places)
        if group_by != "none":
            click.echo()
            click.echo(
                format_table(
                    [group_by, "Entries", "Actual", "Billable", "Cost"],
                    [
                        [
                            group,
                            row["entry_count"],
                            row["total_actual_hours"],
                            row["total_billable_hours"],
                            row["total_cost"],
                        ]
                        for group, row in frame.iterrows()
                    ],
                    align_right=[1, 2, 3, 4],
                )
            )

        if csv_path:
            frame.to_csv(csv_path)
            click.echo(format_success(f"Totals written to {csv_path}"))

        click.echo()
        click.echo(format_success(f"Billed {totals.entry_count} entries"))
