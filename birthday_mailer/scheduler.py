# birthday_mailer/scheduler.py
import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from birthday_mailer.birthday_task import BirthdayRunner
from birthday_mailer.config import Config
from birthday_mailer.mailer import SmtpEmailSender
from birthday_mailer.store import JsonStore

logger = logging.getLogger("scheduler")

JOB_ID = "daily_birthday_emails"


def create_scheduler(runner, config=Config, blocking=False):
    """
    Scheduler with the daily birthday job at SEND_HOUR:SEND_MINUTE.
    No job is added when AUTO_SEND_ENABLED is off.
    """
    scheduler = BlockingScheduler() if blocking else BackgroundScheduler()

    if not config.AUTO_SEND_ENABLED:
        logger.info("⏸️ Automatic birthday emails disabled")
        return scheduler

    def scheduled_birthday_job():
        logger.info("🕛 Scheduled job started: %s", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
        runner.run_birthday_pass("scheduled")

    scheduler.add_job(
        scheduled_birthday_job,
        "cron",
        hour=config.SEND_HOUR,
        minute=config.SEND_MINUTE,
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info("🕛 Daily birthday emails scheduled at %02d:%02d", config.SEND_HOUR, config.SEND_MINUTE)
    return scheduler


def build_runner(config=Config, sender=None):
    return BirthdayRunner(
        JsonStore(config.DATA_FILE),
        sender or SmtpEmailSender.from_config(config),
        delay_seconds=config.SEND_DELAY_SECONDS,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger.info("🚀 Birthday Scheduler is running...")
    create_scheduler(build_runner(), blocking=True).start()
