"""
Activity log helpers.

The persisted log is append-only and is what the once-per-day dedup check
scans. ``recent_logs`` is only the dashboard view.
"""
from birthday_mailer.models import LOG_INFO, LOG_SUCCESS, LogEntry

DISPLAY_LIMIT = 50


def _local_date(entry):
    return entry.occurred_at.astimezone().date()


def already_sent_today(logs, employee_id, today) -> bool:
    """True if ``employee_id`` has a successful send logged on ``today`` (local date)."""
    return any(
        entry.employee_id == employee_id
        and entry.type == LOG_SUCCESS
        and _local_date(entry) == today
        for entry in logs
    )


def record_send(logs, employee_id, outcome, message, now=None):
    logs.append(LogEntry.create(message, type=outcome, employee_id=employee_id, now=now))
    return logs


def add_log(logs, message, type=LOG_INFO, employee_id=None, now=None):
    return record_send(logs, employee_id, type, message, now=now)


def recent_logs(logs, limit=DISPLAY_LIMIT):
    if limit <= 0:
        return []
    return logs[-limit:]


def sent_today_count(logs, today) -> int:
    return sum(1 for entry in logs if entry.type == LOG_SUCCESS and _local_date(entry) == today)
