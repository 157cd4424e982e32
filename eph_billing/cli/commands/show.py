"""Show billing configuration command."""

from typing import Optional

import click

from eph_billing.cli.error_handlers import with_error_handling
from eph_billing.cli.utils.formatters import format_info, format_table
from eph_billing.cli.utils.options import load_billing_config
from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.day_type import ORDINARY_DAY_TYPES, BillingMethod


def config_rows(config: BillingConfig) -> list:
    """One table row per billing category."""
    rows = []
    for day_type in ORDINARY_DAY_TYPES:
        slot = config.for_day_type(day_type)
        if slot is None:
            rows.append([day_type.label, "missing", None, None, None, None])
            continue
        method = (
            "Minimum billing"
            if slot.billing_method == BillingMethod.MINIMUM_BILLING
            else "Per hour"
        )
        rows.append(
            [
                day_type.label,
                slot.enabled,
                method,
                slot.min_hours,
                slot.rate_multiplier,
                slot.custom_rate,
            ]
        )

    rain = config.rain_days
    rows.append(
        [
            "Rain Day",
            rain.enabled,
            f"Minimum below {rain.threshold_hours}h",
            rain.min_hours,
            None,
            None,
        ]
    )
    breakdown = config.breakdown
    rows.append(["Breakdown", breakdown.enabled, "Actual hours", None, None, None])
    return rows


@click.command(name="show-config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON billing configuration (default: BILLING_CONFIG_FILE or built-in)",
)
@click.pass_context
def show_config(ctx: click.Context, config_path: Optional[str]):
    """Show the effective billing configuration.

    Sections missing from the file are shown with their default values.

    Example:
        eph-billing show-config --config billing.json
    """
    debug = (ctx.obj or {}).get("debug", False)

    with with_error_handling(debug):
        config, source = load_billing_config(config_path)

        click.echo(format_info(f"Billing configuration: {source}"))
        click.echo()
        click.echo(
            format_table(
                [
                    "Category",
                    "Enabled",
                    "Method",
                    "Min hours",
                    "Multiplier",
                    "Custom rate",
                ],
                config_rows(config),
                align_right=[3, 4, 5],
            )
        )
        click.echo()
        click.echo(config.summary())
