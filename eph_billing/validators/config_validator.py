"""Billing configuration validator.

Checks a BillingConfig for problems that would make the engine raise, and
for settings that are legal but probably not what the tenant intended.
"""

import logging

from eph_billing.models.billing_config import BillingConfig
from eph_billing.models.day_type import ORDINARY_DAY_TYPES, BillingMethod
from eph_billing.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)


class BillingConfigValidator:
    """Validator for tenant billing configurations.

    Errors mark configurations the policy resolver would reject; warnings
    and info messages never block a billing run.

    Example:
        >>> report = BillingConfigValidator().validate(BillingConfig.default())
        >>> report.is_valid()
        True
    """

    def validate(self, config: BillingConfig) -> ValidationReport:
        """Validate a billing configuration.

        Args:
            config: The configuration to check

        Returns:
            ValidationReport with any issues found
        """
        report = ValidationReport()

        self._validate_ordinary_day_types(config, report)
        self._validate_rain_days(config, report)

        if not config.breakdown.enabled:
            report.add_info(
                "breakdown.enabled",
                "Breakdown billing is disabled; breakdown days bill zero hours",
                False,
            )

        logger.debug(f"Billing config validation: {report.summary()}")
        return report

    def _validate_ordinary_day_types(
        self, config: BillingConfig, report: ValidationReport
    ) -> None:
        for day_type in ORDINARY_DAY_TYPES:
            day_config = config.for_day_type(day_type)
            section = day_type.value

            if day_config is None:
                report.add_error(
                    section,
                    f"No billing configuration for {day_type.label} entries",
                    None,
                )
                continue

            if not day_config.enabled:
                report.add_info(
                    f"{section}.enabled",
                    f"{day_type.label} billing is disabled; actual hours are "
                    "billed without multiplier",
                    False,
                )
                continue

            if (
                day_config.billing_method == BillingMethod.MINIMUM_BILLING
                and day_config.min_hours is None
            ):
                report.add_error(
                    f"{section}.min_hours",
                    f"{day_type.label} uses minimum billing but has no minimum hours",
                    None,
                )

            if day_config.rate_multiplier == 0:
                report.add_warning(
                    f"{section}.rate_multiplier",
                    f"{day_type.label} has a zero rate multiplier; its hours "
                    "will cost nothing",
                    day_config.rate_multiplier,
                )

    def _validate_rain_days(
        self, config: BillingConfig, report: ValidationReport
    ) -> None:
        rain = config.rain_days

        if not rain.enabled:
            report.add_info(
                "rain_days.enabled",
                "Rain-day billing is disabled; rain days bill as their "
                "calendar day",
                False,
            )
            return

        if rain.threshold_hours <= 0:
            report.add_warning(
                "rain_days.threshold_hours",
                "Rain-day threshold is not positive; the rain-day minimum "
                "never applies",
                rain.threshold_hours,
            )
        if rain.min_hours < rain.threshold_hours:
            report.add_warning(
                "rain_days.min_hours",
                f"Rain-day minimum ({rain.min_hours}h) is below the threshold "
                f"({rain.threshold_hours}h); entries just below the threshold "
                "bill less than the hours worked",
                rain.min_hours,
            )
