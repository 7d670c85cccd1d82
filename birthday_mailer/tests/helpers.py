from datetime import datetime

from birthday_mailer.mailer import EmailSendError


def local_time(year, month, day, hour=12, minute=0):
    """Timezone-aware local datetime, so its local date is exactly (year, month, day)."""
    return datetime(year, month, day, hour, minute).astimezone()


def fixed_clock(year, month, day, hour=12):
    return lambda: local_time(year, month, day, hour)


class FakeSender:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    def send_birthday_email(self, employee):
        if employee.email in self.fail_for:
            raise EmailSendError(f"{employee.email}: connection refused")
        self.sent.append(employee.email)
        return f"<msg-{len(self.sent)}@test>"
