"""Day classifier.

Assigns each effective entry exactly one DayType from its condition flags
and calendar date. Flags can overlap, so they are checked in a fixed
priority order (first match wins):

1. breakdown
2. public holiday (flag, or date in the supplied holiday set)
3. rain day / inclement weather
4. Saturday
5. Sunday
6. weekday

A breakdown overrides every other condition: the asset earns nothing while
broken regardless of weather or calendar. Strike days do not change the
category; the flag is carried through to results for reporting only.
"""

import datetime as dt
from typing import Collection, Union

from eph_billing.models.day_type import DayType
from eph_billing.models.entry import EffectiveEntry, RawEntry

SATURDAY = 5
SUNDAY = 6


def calendar_day_type(date: dt.date) -> DayType:
    """Return the ordinary calendar category of a date.

    Example:
        >>> calendar_day_type(dt.date(2024, 3, 9))
        <DayType.SATURDAY: 'saturday'>
    """
    weekday = date.weekday()
    if weekday == SATURDAY:
        return DayType.SATURDAY
    if weekday == SUNDAY:
        return DayType.SUNDAY
    return DayType.WEEKDAY


def classify(
    entry: Union[EffectiveEntry, RawEntry],
    public_holidays: Collection[dt.date] = (),
) -> DayType:
    """Classify an entry into its billing DayType.

    Args:
        entry: Effective entry (a bare RawEntry is accepted too)
        public_holidays: Dates to treat as public holidays in addition to
            the entry's own ``is_public_holiday`` flag

    Returns:
        The DayType of the entry
    """
    raw = entry.entry if isinstance(entry, EffectiveEntry) else entry

    if raw.is_breakdown:
        return DayType.BREAKDOWN
    if raw.is_public_holiday or raw.date in public_holidays:
        return DayType.PUBLIC_HOLIDAY
    if raw.is_rain_day or raw.is_inclement_weather:
        return DayType.RAIN_DAY
    return calendar_day_type(raw.date)
