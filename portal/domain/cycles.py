"""
Monthly reporting cycles.

An internship owes one report per calendar month it touches. The report
for month M opens on the 1st of M+1 and closes at 23:59:59 on the
configured window end day of M+1; anything later is overdue.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DEFAULT_WINDOW_END_DAY = 10


@dataclass(frozen=True)
class MonthlyCycle:
    month: int
    year: int
    period_start: datetime
    period_end: datetime
    window_start: datetime
    window_end: datetime

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]


def _next_month(month: int, year: int) -> tuple[int, int]:
    return (1, year + 1) if month == 12 else (month + 1, year)


def period_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, tzinfo=timezone.utc)
    return start, end


def submission_window(
    month: int, year: int, end_day: int = DEFAULT_WINDOW_END_DAY
) -> tuple[datetime, datetime]:
    """Open/close instants for the report covering ``month``/``year``."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
    next_m, next_y = _next_month(month, year)
    opens = datetime(next_y, next_m, 1, tzinfo=timezone.utc)
    closes = datetime(next_y, next_m, end_day, 23, 59, 59, tzinfo=timezone.utc)
    return opens, closes


def cycle_for(month: int, year: int, end_day: int = DEFAULT_WINDOW_END_DAY) -> MonthlyCycle:
    period_start, period_end = period_bounds(month, year)
    window_start, window_end = submission_window(month, year, end_day)
    return MonthlyCycle(month, year, period_start, period_end, window_start, window_end)


def expected_months(
    start: datetime, end: datetime, end_day: int = DEFAULT_WINDOW_END_DAY
) -> list[MonthlyCycle]:
    """Every calendar month touched by [start, end]; empty if end < start."""
    if end < start:
        return []
    cycles: list[MonthlyCycle] = []
    month, year = start.month, start.year
    while (year, month) <= (end.year, end.month):
        cycles.append(cycle_for(month, year, end_day))
        month, year = _next_month(month, year)
    return cycles


def total_expected(start: datetime, end: datetime) -> int:
    return len(expected_months(start, end))


def due_so_far(
    start: datetime,
    end: datetime,
    now: datetime,
    end_day: int = DEFAULT_WINDOW_END_DAY,
) -> int:
    """Cycles whose submission window has already closed."""
    return sum(1 for c in expected_months(start, end, end_day) if now > c.window_end)


def is_overdue(
    month: int, year: int, now: datetime, end_day: int = DEFAULT_WINDOW_END_DAY
) -> bool:
    return now > submission_window(month, year, end_day)[1]


def month_in_range(
    month: int, year: int, start: datetime | None, end: datetime | None
) -> bool:
    """Whether the report month lies within the internship's months."""
    key = (year, month)
    if start is not None and key < (start.year, start.month):
        return False
    if end is not None and key > (end.year, end.month):
        return False
    return True
