import pytest
from datetime import date, datetime
from app.services.vacation import (
    calculate_vacation_days,
    full_vacation_eligibility_date,
    has_vacation_eligibility,
)

HIRED = date(2024, 9, 1)


def test_no_entitlement_before_hire_year():
    assert calculate_vacation_days(HIRED, 2023) == 0


@pytest.mark.parametrize("hired, expected", [
    (date(2024, 9, 1), 1),    # Oct, Nov, Dec -> 3 // 2
    (date(2024, 1, 10), 5),   # 11 months left -> 5
    (date(2024, 12, 1), 0),   # nothing left after December
    (date(2024, 6, 30), 3),   # 6 months left
])
def test_hire_year_prorates_remaining_months(hired, expected):
    assert calculate_vacation_days(hired, 2024, today=date(2024, 12, 31)) == expected


def test_hire_year_never_exceeds_quota():
    assert calculate_vacation_days(date(2024, 1, 1), 2024, max_days_per_year=3) == 3


def test_second_year_before_anniversary():
    assert calculate_vacation_days(HIRED, 2025, today=date(2025, 8, 31)) == 0


def test_second_year_on_anniversary():
    assert calculate_vacation_days(HIRED, 2025, today=date(2025, 9, 1)) == 6


def test_second_year_viewed_from_the_past():
    assert calculate_vacation_days(HIRED, 2025, today=date(2024, 11, 1)) == 0


def test_second_year_viewed_afterwards():
    assert calculate_vacation_days(HIRED, 2025, today=date(2026, 1, 5)) == 6


def test_later_years_get_full_quota():
    assert calculate_vacation_days(HIRED, 2027, max_days_per_year=10) == 10


def test_accepts_datetime_and_iso_strings():
    today = date(2024, 12, 31)
    assert calculate_vacation_days(datetime(2024, 9, 1, 8, 30), 2024, today=today) == 1
    assert calculate_vacation_days("2024-09-01", 2024, today=today) == 1


def test_full_eligibility_date():
    assert full_vacation_eligibility_date(HIRED) == date(2025, 9, 1)
    assert full_vacation_eligibility_date(date(2024, 2, 29)) == date(2025, 2, 28)


def test_has_vacation_eligibility():
    assert has_vacation_eligibility(HIRED, date(2024, 10, 1)) is True
    assert has_vacation_eligibility(date(2024, 12, 1), date(2024, 12, 15)) is False
    assert has_vacation_eligibility(HIRED, date(2025, 3, 1)) is False
    assert has_vacation_eligibility(HIRED, date(2025, 9, 2)) is True
