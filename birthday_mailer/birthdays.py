import calendar
import datetime
from dataclasses import dataclass

from birthday_mailer.models import Employee


@dataclass
class UpcomingBirthday:
    employee: Employee
    next_birthday: datetime.date
    days_until: int

    def serialize(self):
        data = self.employee.serialize()
        data["nextBirthday"] = self.next_birthday.isoformat()
        data["daysUntil"] = self.days_until
        return data


# === Leap Year Handling ===
def birthday_in_year(birth_date, year):
    """
    The day a birth date is celebrated in ``year``.
    Feb 29 birthdays fall on Feb 28 in non-leap years.
    """
    if birth_date.month == 2 and birth_date.day == 29 and not calendar.isleap(year):
        return datetime.date(year, 2, 28)
    return birth_date.replace(year=year)


def next_birthday(birth_date, today):
    """Next celebration on or after ``today``."""
    this_year = birthday_in_year(birth_date, today.year)
    if this_year < today:
        return birthday_in_year(birth_date, today.year + 1)
    return this_year


def is_birthday(birth_date, today) -> bool:
    return birthday_in_year(birth_date, today.year) == today


# === Matchers ===
def todays_birthdays(employees, today):
    return [e for e in employees if is_birthday(e.fecha_nacimiento, today)]


def upcoming_birthdays(employees, today, window_days=7):
    """Employees whose next birthday is at most ``window_days`` away, nearest first."""
    upcoming = []
    for emp in employees:
        nxt = next_birthday(emp.fecha_nacimiento, today)
        days_until = (nxt - today).days
        if days_until <= window_days:
            upcoming.append(UpcomingBirthday(employee=emp, next_birthday=nxt, days_until=days_until))

    upcoming.sort(key=lambda u: u.days_until)
    return upcoming


def calculate_age(birth_date, today) -> int:
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age
