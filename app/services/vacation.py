"""
Vacation entitlement rules.

- Hire year: one day for every two full months left after the hire month
  (the hire month itself does not count), rounded down.
- Following year: nothing until the one-year anniversary, then the full quota.
- Every later year: the full quota.
"""
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value).date()


def full_vacation_eligibility_date(start_date: DateLike) -> date:
    """Date on which the employee reaches the full vacation quota (first work anniversary)."""
    start = _to_date(start_date)
    try:
        return start.replace(year=start.year + 1)
    except ValueError:
        # Hired on 29 February
        return start.replace(year=start.year + 1, day=28)


def calculate_vacation_days(
    start_date: DateLike,
    year: int,
    max_days_per_year: float = 6,
    today: Optional[date] = None,
) -> float:
    """Vacation days the employee is entitled to for `year`."""
    start = _to_date(start_date)
    today = today or date.today()

    if year < start.year:
        return 0

    if year == start.year:
        remaining_months = 12 - start.month
        return min(remaining_months // 2, max_days_per_year)

    if year == start.year + 1:
        if today.year == year:
            return max_days_per_year if today >= full_vacation_eligibility_date(start) else 0
        if today.year < year:
            # Looking ahead: the anniversary has not happened yet
            return 0
        return max_days_per_year

    return max_days_per_year


def has_vacation_eligibility(start_date: DateLike, check_date: Optional[date] = None) -> bool:
    check_date = check_date or date.today()
    return calculate_vacation_days(start_date, check_date.year, today=check_date) > 0
