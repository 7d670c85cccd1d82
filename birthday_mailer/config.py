import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASS = os.getenv("SMTP_PASS")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
    MAIL_FROM = os.getenv(
        "MAIL_FROM",
        f'"Sistema de Cumpleaños" <{os.getenv("SMTP_USER") or "cumpleanos@localhost"}>',
    )

    DATA_FILE = os.getenv("DATA_FILE", "data.json")

    # Daily automatic send (server local time)
    AUTO_SEND_ENABLED = _env_bool("AUTO_SEND_ENABLED", True)
    SEND_HOUR = int(os.getenv("SEND_HOUR", "12"))
    SEND_MINUTE = int(os.getenv("SEND_MINUTE", "0"))
    SEND_DELAY_SECONDS = float(os.getenv("SEND_DELAY_SECONDS", "2"))

    UPCOMING_WINDOW_DAYS = int(os.getenv("UPCOMING_WINDOW_DAYS", "7"))
    LOG_DISPLAY_LIMIT = int(os.getenv("LOG_DISPLAY_LIMIT", "50"))
    PORT = int(os.getenv("PORT", "3000"))
