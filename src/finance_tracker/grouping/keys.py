"""
Group key derivation.

Each transaction date maps to a display key for its bucket and to a sort key
that orders buckets chronologically. The display key is never used for
ordering: "April 2024" sorts before "January 2024" as a string.
"""
from datetime import date
from typing import Tuple, Union

from finance_tracker.domain.enums import TimeUnit
from finance_tracker.logging_setup import get_logger

logger = get_logger("finance_tracker.grouping.keys")

SortKey = Tuple[int, ...]


def iso_year_week(day: date) -> Tuple[int, int]:
    """
    ISO-8601 (year, week) for a date.

    Week 1 is the week holding the year's first Thursday, weeks run
    Monday to Sunday, so the first and last days of a calendar year can
    belong to the neighbouring ISO year.
    """
    iso_year, iso_week, _ = day.isocalendar()
    if iso_year != day.year:
        logger.debug(
            "Date %s: calendar year %s, ISO year %s, week %s",
            day, day.year, iso_year, iso_week,
        )
    return iso_year, iso_week


def format_week_key(iso_year: int, iso_week: int) -> str:
    return f"{iso_year:04d} - Week {iso_week:02d}"


def key_of(day: date, time_unit: Union[TimeUnit, str]) -> str:
    """
    Display key of the bucket a date falls into.

    Examples:
        >>> key_of(date(2024, 3, 15), TimeUnit.DAY)
        '2024-03-15'
        >>> key_of(date(2021, 1, 1), "Week")
        '2020 - Week 53'
        >>> key_of(date(2024, 3, 15), "Month")
        'March 2024'

    Raises:
        InvalidTimeUnitError: If time_unit isn't Day, Week, Month or Year
    """
    unit = TimeUnit.parse(time_unit)

    if unit == TimeUnit.DAY:
        return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"
    if unit == TimeUnit.WEEK:
        return format_week_key(*iso_year_week(day))
    if unit == TimeUnit.MONTH:
        return f"{day.strftime('%B')} {day.year:04d}"
    return f"{day.year:04d}"


def sort_key_of(day: date, time_unit: Union[TimeUnit, str]) -> SortKey:
    """Chronological ordering value of the bucket a date falls into"""
    unit = TimeUnit.parse(time_unit)

    if unit == TimeUnit.DAY:
        return (day.year, day.month, day.day)
    if unit == TimeUnit.WEEK:
        return iso_year_week(day)
    if unit == TimeUnit.MONTH:
        return (day.year, day.month)
    return (day.year,)
