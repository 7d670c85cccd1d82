from datetime import date, timedelta

from birthday_mailer.birthdays import (
    birthday_in_year,
    calculate_age,
    next_birthday,
    todays_birthdays,
    upcoming_birthdays,
)
from birthday_mailer.models import Employee


def emp(i, birth):
    return Employee(id=i, nombre=f"Empleado {i}", email=f"e{i}@example.com", fecha_nacimiento=birth)


def test_todays_birthdays_matches_month_and_day(ana):
    assert todays_birthdays([ana], date(2024, 6, 15)) == [ana]


def test_todays_birthdays_ignores_year():
    people = [emp(1, date(1950, 3, 10)), emp(2, date(2001, 3, 10)), emp(3, date(2001, 3, 11))]
    matches = todays_birthdays(people, date(2030, 3, 10))
    assert [e.id for e in matches] == [1, 2]


def test_todays_birthdays_over_a_whole_year():
    people = [emp(1, date(1990, 1, 31)), emp(2, date(1975, 12, 1))]
    day = date(2023, 1, 1)
    while day.year == 2023:
        expected = [e for e in people
                    if (e.fecha_nacimiento.month, e.fecha_nacimiento.day) == (day.month, day.day)]
        assert todays_birthdays(people, day) == expected
        day += timedelta(days=1)


def test_upcoming_birthday_days_until():
    upcoming = upcoming_birthdays([emp(1, date(1988, 6, 20))], date(2024, 6, 15), 7)
    assert len(upcoming) == 1
    assert upcoming[0].days_until == 5
    assert upcoming[0].next_birthday == date(2024, 6, 20)


def test_upcoming_includes_today_and_excludes_past():
    people = [emp(1, date(1990, 6, 15)), emp(2, date(1990, 6, 14)), emp(3, date(1990, 6, 22))]
    upcoming = upcoming_birthdays(people, date(2024, 6, 15), 7)
    assert [(u.employee.id, u.days_until) for u in upcoming] == [(1, 0), (3, 7)]


def test_upcoming_wraps_into_next_year():
    upcoming = upcoming_birthdays([emp(1, date(1990, 1, 2))], date(2024, 12, 30), 7)
    assert upcoming[0].days_until == 3
    assert upcoming[0].next_birthday == date(2025, 1, 2)


def test_upcoming_sorted_and_within_window():
    people = [emp(i, date(1980 + i, 6, 15) + timedelta(days=i * 3)) for i in range(10)]
    upcoming = upcoming_birthdays(people, date(2024, 6, 15), 7)
    days = [u.days_until for u in upcoming]
    assert days == sorted(days)
    assert all(0 <= d <= 7 for d in days)
    assert len(days) == 3


def test_leap_day_birthday_on_feb_28_in_common_years():
    leap = emp(1, date(2000, 2, 29))
    assert todays_birthdays([leap], date(2023, 2, 28)) == [leap]
    assert todays_birthdays([leap], date(2023, 3, 1)) == []


def test_leap_day_birthday_on_feb_29_in_leap_years():
    leap = emp(1, date(2000, 2, 29))
    assert todays_birthdays([leap], date(2024, 2, 29)) == [leap]
    assert todays_birthdays([leap], date(2024, 2, 28)) == []


def test_leap_day_upcoming_in_common_year():
    assert next_birthday(date(2000, 2, 29), date(2023, 2, 20)) == date(2023, 2, 28)
    assert next_birthday(date(2000, 2, 29), date(2023, 3, 1)) == date(2024, 2, 29)
    assert birthday_in_year(date(2000, 2, 29), 2025) == date(2025, 2, 28)


def test_calculate_age():
    assert calculate_age(date(1990, 6, 15), date(2024, 6, 14)) == 33
    assert calculate_age(date(1990, 6, 15), date(2024, 6, 15)) == 34
