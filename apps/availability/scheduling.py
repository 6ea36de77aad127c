"""Pure date helpers: recurrence expansion and the month grid."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Mapping

WEEKLY = "weekly"
BIWEEKLY = "biweekly"
MONTHLY = "monthly"
RECURRENCE_RULES = (WEEKLY, BIWEEKLY, MONTHLY)

# Cell statuses on the month grid
OPEN = "open"
BOOKED = "booked"
UNAVAILABLE = "unavailable"


def add_months(start: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length.

    add_months(date(2025, 1, 31), 1) -> date(2025, 2, 28)
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def expand_recurrence(rule: str, count: int, start: date) -> list[date]:
    """Return `count` dates beginning at `start` spaced by the rule."""
    if rule not in RECURRENCE_RULES:
        raise ValueError(f"Unknown recurrence rule: {rule}")
    if count < 1:
        raise ValueError("Recurrence count must be at least 1")

    if rule == MONTHLY:
        return [add_months(start, i) for i in range(count)]

    step = timedelta(days=7 if rule == WEEKLY else 14)
    return [start + step * i for i in range(count)]


def month_grid(year: int, month: int, statuses: Mapping[date, str], today: date) -> list[list[dict | None]]:
    """Weeks of seven cells, Sunday first. Days outside the month are None."""
    weeks: list[list[dict | None]] = []
    for week in calendar.Calendar(firstweekday=6).monthdayscalendar(year, month):
        row: list[dict | None] = []
        for day in week:
            if day == 0:
                row.append(None)
                continue
            current = date(year, month, day)
            status = statuses.get(current, UNAVAILABLE)
            is_past = current < today
            row.append(
                {
                    "date": current,
                    "day": day,
                    "status": status,
                    "is_past": is_past,
                    "is_editable": not is_past and status != BOOKED,
                }
            )
        weeks.append(row)
    return weeks
