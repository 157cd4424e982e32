"""Shared option parsing for CLI commands."""

import datetime as dt
from decimal import Decimal
from typing import Optional, Sequence, Tuple

import click

from eph_billing.config.settings import get_config
from eph_billing.models.base import to_decimal
from eph_billing.models.billing_config import BillingConfig
from eph_billing.readers.json_reader import read_billing_config


def parse_decimal(ctx, param, value: Optional[str]) -> Optional[Decimal]:
    """Click callback converting an option value to a non-negative Decimal."""
    if value is None:
        return None
    try:
        number = to_decimal(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a number")
    if not number.is_finite() or number < 0:
        raise click.BadParameter(f"'{value}' must be a non-negative number")
    return number


def to_dates(values: Sequence[dt.datetime]) -> Tuple[dt.date, ...]:
    """Convert click.DateTime values to dates."""
    return tuple(value.date() for value in values)


def load_billing_config(config_path: Optional[str]) -> Tuple[BillingConfig, str]:
    """Load the billing configuration for a command.

    Falls back to ``BILLING_CONFIG_FILE`` from the settings, then to the
    built-in defaults.

    Returns:
        Tuple of (BillingConfig, description of where it came from)
    """
    path = config_path or get_config().billing_config_file
    if path:
        return read_billing_config(path), path
    return BillingConfig.default(), "built-in defaults"
