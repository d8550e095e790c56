"""Date manipulation utilities"""

from datetime import date
from typing import List, Tuple

from budget_ledger.domain.exceptions import InvalidPeriodError


def validate_month(year: int, month: int) -> None:
    """Reject a (year, month) pair that is not a real calendar month"""
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9998:
        raise InvalidPeriodError(f"Year out of range: {year}")


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """Calendar month before (year, month), wrapping January to December"""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> Tuple[int, int]:
    """Calendar month after (year, month), wrapping December to January"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def preceding_months(year: int, month: int, count: int) -> List[Tuple[int, int]]:
    """The `count` months strictly before (year, month), most recent first"""
    months = []
    for _ in range(count):
        year, month = previous_month(year, month)
        months.append((year, month))
    return months


def month_stamp(day: date) -> Tuple[int, int]:
    return day.year, day.month
