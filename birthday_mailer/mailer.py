import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from birthday_mailer.config import Config

logger = logging.getLogger("mailer")

GREETING_BODY = """¡Feliz cumpleaños {nombre}!

En nombre de todo el equipo, queremos desearte un día lleno de alegría, momentos especiales y celebración.

Que este nuevo año de vida esté cargado de éxito, salud y felicidad.

¡Felicidades! 🎂🎉

---
Atentamente,
Sistema de Cumpleaños"""


class EmailSendError(Exception):
    """SMTP or network failure while sending."""


def birthday_subject(employee) -> str:
    return f"🎉 ¡Feliz Cumpleaños {employee.first_name}!"


def birthday_body(employee) -> str:
    return GREETING_BODY.format(nombre=employee.nombre)


class SmtpEmailSender:
    def __init__(self, host=None, port=None, user=None, password=None, use_tls=None,
                 sender=None, timeout=30):
        self.host = host or Config.SMTP_HOST
        self.port = port or Config.SMTP_PORT
        self.user = user if user is not None else Config.SMTP_USER
        self.password = password if password is not None else Config.SMTP_PASS
        self.use_tls = Config.SMTP_USE_TLS if use_tls is None else use_tls
        self.sender = sender or Config.MAIL_FROM
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            user=config.SMTP_USER,
            password=config.SMTP_PASS,
            use_tls=config.SMTP_USE_TLS,
            sender=config.MAIL_FROM,
        )

    def build_message(self, recipient, subject, body) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        msg.set_content(body)
        return msg

    def send(self, recipient, subject, body) -> str:
        """Send one message and return its Message-ID."""
        msg = self.build_message(recipient, subject, body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailSendError(f"{recipient}: {e}") from e

        logger.info("📧 Email sent to %s (%s)", recipient, msg["Message-ID"])
        return msg["Message-ID"]

    def send_birthday_email(self, employee) -> str:
        return self.send(employee.email, birthday_subject(employee), birthday_body(employee))
