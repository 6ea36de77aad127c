"""Unit tests for recurrence expansion and the month grid."""

from __future__ import annotations

from datetime import date

import pytest

from apps.availability import scheduling


def test_weekly_and_biweekly_spacing() -> None:
    start = date(2025, 3, 1)
    assert scheduling.expand_recurrence("weekly", 3, start) == [
        date(2025, 3, 1),
        date(2025, 3, 8),
        date(2025, 3, 15),
    ]
    assert scheduling.expand_recurrence("biweekly", 2, start) == [date(2025, 3, 1), date(2025, 3, 15)]


def test_monthly_clamps_to_month_end() -> None:
    dates = scheduling.expand_recurrence("monthly", 4, date(2024, 1, 31))
    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


def test_add_months_crosses_year_boundary() -> None:
    assert scheduling.add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)


@pytest.mark.parametrize("rule,count", [("daily", 2), ("weekly", 0)])
def test_invalid_recurrence_raises(rule: str, count: int) -> None:
    with pytest.raises(ValueError):
        scheduling.expand_recurrence(rule, count, date(2025, 1, 1))


def test_month_grid_marks_statuses() -> None:
    statuses = {date(2025, 6, 10): "open", date(2025, 6, 20): "booked"}
    weeks = scheduling.month_grid(2025, 6, statuses, today=date(2025, 6, 15))

    # June 2025 starts on a Sunday
    assert weeks[0][0]["day"] == 1
    assert all(len(week) == 7 for week in weeks)

    cells = {cell["day"]: cell for week in weeks for cell in week if cell}
    assert len(cells) == 30
    assert cells[10]["status"] == "open"
    assert cells[10]["is_past"] is True
    assert cells[10]["is_editable"] is False
    assert cells[20]["status"] == "booked"
    assert cells[20]["is_editable"] is False
    assert cells[25]["status"] == "unavailable"
    assert cells[25]["is_editable"] is True


def test_month_grid_pads_outside_days_with_none() -> None:
    # February 2025 starts on a Saturday
    weeks = scheduling.month_grid(2025, 2, {}, today=date(2025, 1, 1))
    assert weeks[0][:6] == [None] * 6
    assert weeks[0][6]["day"] == 1
