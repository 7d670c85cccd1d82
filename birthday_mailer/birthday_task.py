import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List

from birthday_mailer.birthdays import todays_birthdays
from birthday_mailer.employees import EmployeeNotFound, find_employee
from birthday_mailer.mailer import EmailSendError
from birthday_mailer.models import LOG_ERROR, LOG_INFO, LOG_SUCCESS, local_today, utc_now
from birthday_mailer.send_log import already_sent_today, record_send

logger = logging.getLogger("birthday_task")

STATUS_IDLE = "idle"            # nothing left to send today
STATUS_COMPLETED = "completed"  # queue processed
STATUS_BUSY = "busy"            # another pass holds the run lock


@dataclass
class RunResult:
    status: str
    trigger: str = "manual"
    matched: List[int] = field(default_factory=list)
    sent: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)

    def serialize(self):
        return {
            "status": self.status,
            "trigger": self.trigger,
            "matched": self.matched,
            "sent": self.sent,
            "failed": self.failed,
            "skipped": self.skipped,
        }


class BirthdayRunner:
    """
    Match -> filter unsent -> send sequentially -> log.

    Delivery is at-least-once: a crash after the SMTP call but before the
    log is persisted means the employee is sent to again on the next pass.
    """

    def __init__(self, store, sender, delay_seconds=2.0, sleep=time.sleep, clock=utc_now):
        self.store = store
        self.sender = sender
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self._clock = clock
        self._run_lock = threading.Lock()

    def _today(self):
        return local_today(self._clock)

    @property
    def running(self) -> bool:
        return self._run_lock.locked()

    # ---------------- Passes ---------------- #

    def run_birthday_pass(self, trigger="manual") -> RunResult:
        if not self._run_lock.acquire(blocking=False):
            logger.warning("⏳ Birthday pass (%s) skipped: another pass is running", trigger)
            return RunResult(status=STATUS_BUSY, trigger=trigger)
        try:
            return self._run_pass(trigger)
        finally:
            self._run_lock.release()

    def _run_pass(self, trigger):
        today = self._today()
        logger.info("🎂 [%s] Checking birthdays for %s", trigger, today.isoformat())

        store = self.store.load()
        matches = todays_birthdays(store.employees, today)
        result = RunResult(status=STATUS_IDLE, trigger=trigger, matched=[e.id for e in matches])

        if not matches:
            logger.info("ℹ️ No birthdays today.")
            return result

        queue = []
        for emp in matches:
            if already_sent_today(store.logs, emp.id, today):
                result.skipped.append(emp.id)
            else:
                queue.append(emp)

        if not queue:
            logger.info("✅ All %d birthdays already congratulated today", len(matches))
            return result

        record_send(store.logs, None, LOG_INFO, f"🔍 Encontrados {len(matches)} cumpleaños hoy",
                    now=self._clock())
        self.store.replace(store)

        result.status = STATUS_COMPLETED
        logger.info("📨 Sending %d birthday emails...", len(queue))
        for i, emp in enumerate(queue):
            if self._deliver(emp, automatic=(trigger == "scheduled")):
                result.sent.append(emp.id)
            else:
                result.failed.append(emp.id)

            if i < len(queue) - 1 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        logger.info("🎉 Birthday pass completed: %d sent, %d failed", len(result.sent), len(result.failed))
        return result

    def send_to_employee(self, employee_id) -> RunResult:
        """Manual send to a single employee, still subject to the same-day dedup."""
        if not self._run_lock.acquire(blocking=False):
            return RunResult(status=STATUS_BUSY, trigger="single")
        try:
            today = self._today()
            store = self.store.load()
            emp = find_employee(store, employee_id)
            if emp is None:
                raise EmployeeNotFound(employee_id)

            result = RunResult(status=STATUS_COMPLETED, trigger="single", matched=[emp.id])
            if already_sent_today(store.logs, emp.id, today):
                logger.info("ℹ️ %s already congratulated today", emp.nombre)
                result.skipped.append(emp.id)
            elif self._deliver(emp):
                result.sent.append(emp.id)
            else:
                result.failed.append(emp.id)
            return result
        finally:
            self._run_lock.release()

    # ---------------- Helpers ---------------- #

    def _deliver(self, emp, automatic=False) -> bool:
        try:
            message_id = self.sender.send_birthday_email(emp)
        except EmailSendError as e:
            logger.error("❌ Error sending to %s: %s", emp.nombre, e)
            self._append_log(emp.id, LOG_ERROR, f"❌ Error enviando a {emp.nombre}")
            return False
        except Exception as e:
            logger.exception("🚨 Unexpected error sending to %s: %s", emp.nombre, e)
            self._append_log(emp.id, LOG_ERROR, f"❌ Error enviando a {emp.nombre}")
            return False

        how = "automáticamente " if automatic else ""
        logger.info("✅ Birthday email sent to %s (%s)", emp.nombre, message_id)
        self._append_log(emp.id, LOG_SUCCESS, f"✅ Email enviado {how}a {emp.nombre}")
        return True

    def _append_log(self, employee_id, outcome, message):
        # Re-read so edits made while the SMTP call was in flight are kept
        store = self.store.load()
        record_send(store.logs, employee_id, outcome, message, now=self._clock())
        self.store.replace(store)
