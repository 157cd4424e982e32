"""Unit tests for the day classifier."""

import datetime as dt
import itertools

import pytest

from eph_billing.classifiers.day_classifier import calendar_day_type, classify
from eph_billing.models import DayType, EffectiveEntry

MONDAY = dt.date(2024, 3, 4)
FRIDAY = dt.date(2024, 3, 8)
SATURDAY = dt.date(2024, 3, 9)
SUNDAY = dt.date(2024, 3, 10)


class TestCalendarDayType:
    """Test calendar categories."""

    @pytest.mark.parametrize(
        "date,expected",
        [
            (MONDAY, DayType.WEEKDAY),
            (FRIDAY, DayType.WEEKDAY),
            (SATURDAY, DayType.SATURDAY),
            (SUNDAY, DayType.SUNDAY),
        ],
    )
    def test_day_of_week(self, date, expected):
        assert calendar_day_type(date) == expected


class TestClassify:
    """Test flag priority."""

    def test_plain_weekday(self, entry_factory):
        assert classify(entry_factory(date=MONDAY)) == DayType.WEEKDAY

    def test_plain_sunday(self, entry_factory):
        assert classify(entry_factory(date=SUNDAY)) == DayType.SUNDAY

    def test_public_holiday_flag(self, entry_factory):
        entry = entry_factory(date=SATURDAY, is_public_holiday=True)
        assert classify(entry) == DayType.PUBLIC_HOLIDAY

    def test_public_holiday_set(self, entry_factory):
        entry = entry_factory(date=MONDAY)
        assert classify(entry, public_holidays={MONDAY}) == DayType.PUBLIC_HOLIDAY

    def test_public_holiday_beats_rain(self, entry_factory):
        entry = entry_factory(is_public_holiday=True, is_rain_day=True)
        assert classify(entry) == DayType.PUBLIC_HOLIDAY

    def test_inclement_weather_is_a_rain_day(self, entry_factory):
        entry = entry_factory(date=SUNDAY, is_inclement_weather=True)
        assert classify(entry) == DayType.RAIN_DAY

    def test_strike_day_does_not_change_category(self, entry_factory):
        entry = entry_factory(date=SATURDAY, is_strike_day=True)
        assert classify(entry) == DayType.SATURDAY

    @pytest.mark.parametrize(
        "flags", list(itertools.product([True, False], repeat=3))
    )
    @pytest.mark.parametrize("date", [MONDAY, SATURDAY, SUNDAY])
    def test_breakdown_always_wins(self, entry_factory, flags, date):
        public_holiday, rain, inclement = flags
        entry = entry_factory(
            date=date,
            is_breakdown=True,
            is_public_holiday=public_holiday,
            is_rain_day=rain,
            is_inclement_weather=inclement,
        )
        assert classify(entry, public_holidays={date}) == DayType.BREAKDOWN

    def test_accepts_effective_entry(self, entry_factory):
        effective = EffectiveEntry(entry=entry_factory(is_rain_day=True))
        assert classify(effective) == DayType.RAIN_DAY
