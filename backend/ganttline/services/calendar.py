"""
Working-day calendar arithmetic.

All spans are measured in whole working-day slots: a task needing half a
day of capacity still occupies one calendar day on the Gantt chart.

End dates are exclusive. add_working_span() returns the first working day
after the last day a task occupies, which is also the earliest day a
dependent task may start.
"""

import math
from datetime import date, timedelta
from typing import AbstractSet

ONE_DAY = timedelta(days=1)

# Absorbs float noise such as 24.000000001 / 8
_HOURS_TOLERANCE = 1e-9


def _check_calendar(working_days: AbstractSet[int]) -> None:
    if not working_days:
        raise ValueError("Calendar has no working days")


def is_working_day(day: date, working_days: AbstractSet[int]) -> bool:
    """True if the ISO weekday of day is one of working_days."""
    return day.isoweekday() in working_days


def working_day_count(hours: float, hours_per_day: float) -> int:
    """Number of whole working days needed to absorb hours (at least one)."""
    if hours_per_day <= 0:
        raise ValueError(f"hours_per_day must be positive, got {hours_per_day}")
    return max(1, math.ceil(hours / hours_per_day - _HOURS_TOLERANCE))


def roll_forward(day: date, working_days: AbstractSet[int]) -> date:
    """First working day on or after day."""
    _check_calendar(working_days)
    while not is_working_day(day, working_days):
        day += ONE_DAY
    return day


def roll_back(day: date, working_days: AbstractSet[int]) -> date:
    """Last working day on or before day."""
    _check_calendar(working_days)
    while not is_working_day(day, working_days):
        day -= ONE_DAY
    return day


def add_working_span(
    day: date,
    hours: float,
    hours_per_day: float,
    working_days: AbstractSet[int],
) -> date:
    """
    Walk forward from day until hours are absorbed.
    Whole weeks are skipped in one step, only the remainder is walked.

    Consumption starts at day, or at the next working day when day itself
    is not one. Returns the exclusive end: the first working day after the
    last consumed day.

    Example (Mon-Fri, 8h days): Friday + 8h -> Monday, Friday + 12h -> Tuesday.
    """
    _check_calendar(working_days)
    full_weeks, remaining = divmod(working_day_count(hours, hours_per_day), len(working_days))
    current = roll_forward(day, working_days) + timedelta(weeks=full_weeks)
    while remaining:
        if is_working_day(current, working_days):
            remaining -= 1
        current += ONE_DAY
    return roll_forward(current, working_days)


def subtract_working_span(
    end: date,
    hours: float,
    hours_per_day: float,
    working_days: AbstractSet[int],
) -> date:
    """
    Inverse of add_working_span().

    Walks back from the exclusive end and returns the first day of the span.
    For any working day d: add_working_span(subtract_working_span(d, h), h) == d.
    """
    _check_calendar(working_days)
    full_weeks, remaining = divmod(working_day_count(hours, hours_per_day), len(working_days))
    current = end - timedelta(weeks=full_weeks)
    while remaining:
        current -= ONE_DAY
        if is_working_day(current, working_days):
            remaining -= 1
    return roll_forward(current, working_days)


def working_days_between(start: date, end: date, working_days: AbstractSet[int]) -> int:
    """
    Count working days in [start, end).

    Negative when end is before start, so the result reads as a signed
    distance: working_days_between(es, ls) is a task's slack.
    """
    if end < start:
        return -working_days_between(end, start, working_days)
    full_weeks, remainder = divmod((end - start).days, 7)
    count = full_weeks * len(working_days)
    for offset in range(remainder):
        if is_working_day(start + timedelta(days=offset), working_days):
            count += 1
    return count


def iso_week(day: date) -> int:
    return day.isocalendar()[1]


def weeks_in_iso_year(year: int) -> int:
    # 28 December always falls in the last ISO week of its year
    return date(year, 12, 28).isocalendar()[1]


def iso_week_start(week_number: int, project_start: date) -> date:
    """
    Monday of ISO week week_number, relative to the project's year.

    Week numbers lower than the project start's week belong to the next
    ISO year, so a project starting in week 50 can pin a task to week 2.
    Week 53 in a year with only 52 ISO weeks is clamped to week 52.
    """
    start_year, start_week, _ = project_start.isocalendar()
    year = start_year + 1 if week_number < start_week else start_year
    week_number = min(week_number, weeks_in_iso_year(year))
    return date.fromisocalendar(year, 1, 1) + timedelta(weeks=week_number - 1)
