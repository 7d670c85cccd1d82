import logging
import time

from flask import Flask
from flask_cors import CORS

from birthday_mailer.birthday_task import BirthdayRunner
from birthday_mailer.config import Config
from birthday_mailer.mailer import SmtpEmailSender
from birthday_mailer.models import utc_now
from birthday_mailer.routes import api_bp
from birthday_mailer.scheduler import create_scheduler
from birthday_mailer.store import JsonStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("birthday-mailer")


def create_app(config=Config, sender=None, clock=utc_now, sleep=time.sleep, start_scheduler=False):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config)
    app.config["CLOCK"] = clock
    CORS(app)

    runner = BirthdayRunner(
        JsonStore(config.DATA_FILE),
        sender or SmtpEmailSender.from_config(config),
        delay_seconds=config.SEND_DELAY_SECONDS,
        sleep=sleep,
        clock=clock,
    )
    app.extensions["birthday_runner"] = runner
    app.register_blueprint(api_bp)

    if start_scheduler:
        scheduler = create_scheduler(runner, config)
        scheduler.start()
        app.extensions["birthday_scheduler"] = scheduler

    logger.info("📁 Using data file %s", config.DATA_FILE)
    return app


if __name__ == "__main__":
    app = create_app(start_scheduler=True)
    logger.info("🚀 Server running on http://localhost:%s", Config.PORT)
    app.run(host="0.0.0.0", port=Config.PORT, use_reloader=False)
