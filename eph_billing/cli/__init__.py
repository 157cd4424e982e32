"""EPH Billing CLI.

This module provides a command-line interface for the billing engine.
It includes commands for calculating billable hours, showing the billing
configuration, and validating configurations and entries.
"""

import click

from eph_billing import __version__
from eph_billing.cli.commands.calculate import calculate_hours
from eph_billing.cli.commands.show import show_config
from eph_billing.cli.commands.validate import validate_config, validate_entries
from eph_billing.config.logging_config import LoggingConfig, configure_logging
from eph_billing.config.settings import get_config


@click.group(help="EPH Billing CLI - Resolve timesheet entries into billable hours")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Debug logging and full stack traces")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """EPH Billing CLI main entry point."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    configure_logging(LoggingConfig.from_settings(get_config(), debug=debug))


# Register commands
cli.add_command(calculate_hours)
cli.add_command(show_config)
cli.add_command(validate_config)
cli.add_command(validate_entries)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
