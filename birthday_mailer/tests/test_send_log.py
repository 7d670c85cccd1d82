from datetime import date

from birthday_mailer.models import LOG_ERROR, LOG_INFO, LOG_SUCCESS, LogEntry
from birthday_mailer.send_log import (
    add_log,
    already_sent_today,
    record_send,
    recent_logs,
    sent_today_count,
)

from birthday_mailer.tests.helpers import local_time


def test_success_today_counts_as_sent():
    logs = record_send([], 1, LOG_SUCCESS, "ok", now=local_time(2024, 6, 15, 9))
    assert already_sent_today(logs, 1, date(2024, 6, 15))
    # unchanged logs give the same answer
    assert already_sent_today(logs, 1, date(2024, 6, 15))


def test_error_entry_does_not_count_as_sent():
    logs = record_send([], 1, LOG_ERROR, "smtp down", now=local_time(2024, 6, 15, 9))
    assert not already_sent_today(logs, 1, date(2024, 6, 15))
    assert not already_sent_today(logs, 1, date(2024, 6, 15))


def test_other_employee_and_info_entries_ignored():
    logs = []
    record_send(logs, 2, LOG_SUCCESS, "ok", now=local_time(2024, 6, 15))
    add_log(logs, "👥 agregado", employee_id=1, now=local_time(2024, 6, 15))
    assert not already_sent_today(logs, 1, date(2024, 6, 15))


def test_sent_yesterday_is_eligible_again():
    logs = record_send([], 1, LOG_SUCCESS, "ok", now=local_time(2024, 6, 15, 23, 59))
    assert already_sent_today(logs, 1, date(2024, 6, 15))
    assert not already_sent_today(logs, 1, date(2024, 6, 16))


def test_dedup_scans_beyond_display_cap():
    logs = record_send([], 1, LOG_SUCCESS, "ok", now=local_time(2024, 6, 15, 8))
    for i in range(120):
        add_log(logs, f"info {i}", now=local_time(2024, 6, 15, 10))

    assert len(logs) == 121
    assert all(entry.employee_id is None for entry in recent_logs(logs))
    assert already_sent_today(logs, 1, date(2024, 6, 15))


def test_recent_logs_keeps_newest_fifty():
    logs = []
    for i in range(60):
        add_log(logs, f"m{i}")
    view = recent_logs(logs)
    assert len(view) == 50
    assert view[0].message == "m10"
    assert view[-1].message == "m59"
    assert recent_logs(logs, 0) == []


def test_record_send_is_append_only():
    logs = [LogEntry.create("first")]
    record_send(logs, 3, LOG_INFO, "second")
    assert [e.message for e in logs] == ["first", "second"]
    assert logs[1].employee_id == 3


def test_offset_timestamp_string_compared_by_local_date():
    stamp = local_time(2024, 6, 15, 12).isoformat()
    logs = [LogEntry(timestamp=stamp, message="ok", type=LOG_SUCCESS, employee_id=1)]
    assert already_sent_today(logs, 1, date(2024, 6, 15))


def test_sent_today_count():
    logs = []
    record_send(logs, 1, LOG_SUCCESS, "ok", now=local_time(2024, 6, 15))
    record_send(logs, 2, LOG_SUCCESS, "ok", now=local_time(2024, 6, 14))
    record_send(logs, 3, LOG_ERROR, "fail", now=local_time(2024, 6, 15))
    assert sent_today_count(logs, date(2024, 6, 15)) == 1
