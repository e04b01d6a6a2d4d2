"""Calendar Arithmetic

Pure date helpers for recurring schedules. Every step re-applies the
day-of-month clamp, so a day-31 series lands on the last day of February
and returns to the 31st as soon as the target month allows it.
"""

from calendar import monthrange
from datetime import date
from typing import List, Optional

from src.domain.recurring_invoice import RecurrenceFrequency


def last_day_of_month(year: int, month: int) -> int:
    _, last_day = monthrange(year, month)
    return last_day


def clamped_date(year: int, month: int, day_of_month: int) -> date:
    """Build a date, reducing day_of_month to the month's last day if needed"""
    return date(year, month, min(day_of_month, last_day_of_month(year, month)))


def add_months(anchor: date, months: int, day_of_month: int) -> date:
    """
    Move anchor by a number of months, targeting day_of_month

    Args:
        anchor: Date to move from (only its year and month are used)
        months: Number of months to add
        day_of_month: Target day (1-31), clamped to the target month

    Returns:
        Clamped date in the target month
    """
    month_index = anchor.year * 12 + (anchor.month - 1) + months
    year, month = divmod(month_index, 12)
    return clamped_date(year, month + 1, day_of_month)


def advance(anchor: date, frequency: RecurrenceFrequency, day_of_month: Optional[int] = None) -> date:
    """
    Add exactly one period to anchor

    Args:
        anchor: Current anchor date
        frequency: monthly (+1 month), quarterly (+3) or yearly (+12)
        day_of_month: Series target day; defaults to the anchor's own day

    Returns:
        Next anchor date
    """
    target_day = day_of_month if day_of_month is not None else anchor.day
    return add_months(anchor, RecurrenceFrequency(frequency).months, target_day)


def clamp_to_day(start: date, day_of_month: int) -> date:
    """
    First anchor on or after start that matches day_of_month

    Tries the start month first and falls back to the following month.
    """
    candidate = clamped_date(start.year, start.month, day_of_month)
    if candidate < start:
        candidate = add_months(start, 1, day_of_month)
    return candidate


def occurrences(
    first: date,
    frequency: RecurrenceFrequency,
    day_of_month: int,
    count: int,
    end_date: Optional[date] = None,
) -> List[date]:
    """Upcoming anchors starting at first, stopping at count or end_date"""
    dates: List[date] = []
    current = first
    while len(dates) < count:
        if end_date is not None and current > end_date:
            break
        dates.append(current)
        current = advance(current, frequency, day_of_month)
    return dates
