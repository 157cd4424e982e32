"""Day classification for billing."""

from eph_billing.classifiers.day_classifier import calendar_day_type, classify

__all__ = ["calendar_day_type", "classify"]
