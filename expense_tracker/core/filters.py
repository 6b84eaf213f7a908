# expense_tracker/core/filters.py
"""Classify expense dates into the "this week" and "this month" buckets."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple

from expense_tracker.core.models import Expense, FilterMode

# YYYY-MM-DD, optionally followed by a time part
_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?", re.ASCII | re.DOTALL)


def parse_expense_date(value) -> date | None:
    """Return the calendar date of an ISO string, or ``None`` if it is unusable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    match = _DATE_RE.fullmatch(value.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def week_bounds(today: date) -> Tuple[date, date]:
    """Return the Monday and Sunday of the week containing *today*."""
    # 0=Sunday..6=Saturday, so Sunday steps back six days to its Monday.
    weekday = today.isoweekday() % 7
    monday = today - timedelta(days=(weekday + 6) % 7)
    return monday, monday + timedelta(days=6)


def matches_filter(value, mode: FilterMode, today: date | None = None) -> bool:
    mode = FilterMode.parse(mode) if not isinstance(mode, FilterMode) else mode
    if mode is FilterMode.ALL:
        return True

    expense_date = parse_expense_date(value)
    if expense_date is None:
        return False

    today = today or date.today()
    if mode is FilterMode.WEEK:
        monday, sunday = week_bounds(today)
        return monday <= expense_date <= sunday
    return (
        expense_date.year == today.year
        and expense_date.month == today.month
    )


def filter_expenses(
    expenses: Iterable[Expense],
    mode: FilterMode,
    today: date | None = None,
) -> List[Expense]:
    """Return the expenses matching *mode*, keeping the input order."""
    mode = FilterMode.parse(mode) if not isinstance(mode, FilterMode) else mode
    if mode is FilterMode.ALL:
        return list(expenses)
    today = today or date.today()
    return [e for e in expenses if matches_filter(e.date, mode, today)]
