"""CLI commands."""

from eph_billing.cli.commands.calculate import calculate_hours
from eph_billing.cli.commands.show import show_config
from eph_billing.cli.commands.validate import validate_config, validate_entries

__all__ = ["calculate_hours", "show_config", "validate_config", "validate_entries"]
