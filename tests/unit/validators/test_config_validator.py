"""Unit tests for the billing configuration validator."""

from decimal import Decimal

import pytest

from eph_billing.models import BillingConfig, BillingMethod, DayTypeConfig
from eph_billing.validators.config_validator import BillingConfigValidator


@pytest.fixture
def validator():
    return BillingConfigValidator()


def fields(issues):
    return [issue.field for issue in issues]


class TestBillingConfigValidator:
    """Test configuration checks."""

    def test_default_config_is_clean(self, validator, billing_config):
        report = validator.validate(billing_config)

        assert report.is_valid()
        assert report.issues == []

    def test_missing_sections_are_errors(self, validator):
        report = validator.validate(BillingConfig())

        assert fields(report.get_errors()) == [
            "weekday",
            "saturday",
            "sunday",
            "public_holiday",
        ]

    def test_minimum_billing_without_min_hours(self, validator, billing_config):
        config = billing_config.model_copy(
            update={
                "sunday": DayTypeConfig(billing_method=BillingMethod.MINIMUM_BILLING)
            }
        )

        report = validator.validate(config)

        assert fields(report.get_errors()) == ["sunday.min_hours"]

    def test_zero_multiplier_warning(self, validator, billing_config):
        config = billing_config.model_copy(
            update={"weekdays": DayTypeConfig(rate_multiplier=0)}
        )

        report = validator.validate(config)

        assert report.is_valid()
        assert fields(report.get_warnings()) == ["weekday.rate_multiplier"]
        assert report.get_warnings()[0].value == Decimal("0")

    def test_disabled_day_type_is_info_only(self, validator, billing_config):
        config = billing_config.model_copy(
            update={
                "saturday": DayTypeConfig(
                    enabled=False,
                    billing_method=BillingMethod.MINIMUM_BILLING,
                    rate_multiplier=0,
                )
            }
        )

        report = validator.validate(config)

        assert report.is_valid()
        assert report.warning_count == 0
        assert fields(report.get_info()) == ["saturday.enabled"]

    def test_rain_minimum_below_threshold(self, validator, config_factory):
        config = config_factory(rainDays={"minHours": "0.5", "thresholdHours": 2})

        report = validator.validate(config)

        assert fields(report.get_warnings()) == ["rain_days.min_hours"]

    def test_zero_threshold(self, validator, config_factory):
        config = config_factory(rainDays={"thresholdHours": 0})

        report = validator.validate(config)

        assert fields(report.get_warnings()) == ["rain_days.threshold_hours"]

    def test_disabled_rain_and_breakdown(self, validator, config_factory):
        config = config_factory(
            rainDays={"enabled": False}, breakdown={"enabled": False}
        )

        report = validator.validate(config)

        assert report.is_valid()
        assert fields(report.get_info()) == ["rain_days.enabled", "breakdown.enabled"]
