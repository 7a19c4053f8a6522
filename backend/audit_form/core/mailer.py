import logging
import smtplib
import ssl
from email.message import EmailMessage

from audit_form.core.settings import Settings

log = logging.getLogger("uvicorn.error")


def _open_connection(settings: Settings) -> smtplib.SMTP:
    context = ssl.create_default_context()
    if settings.smtp_secure:
        return smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context)
    smtp = smtplib.SMTP(settings.smtp_host, settings.smtp_port)
    try:
        smtp.ehlo()
        if smtp.has_extn("starttls"):
            smtp.starttls(context=context)
            smtp.ehlo()
    except Exception:
        smtp.close()
        raise
    return smtp


def send_message(message: EmailMessage, settings: Settings) -> None:
    """Deliver one message through the configured relay.

    A fresh connection is opened and closed for every call. Transport and
    relay errors are left to the caller.
    """
    with _open_connection(settings) as smtp:
        if settings.smtp_user:
            smtp.login(settings.smtp_user, settings.smtp_password or "")
        smtp.send_message(message)
    log.info(f"[mailer] delivered to {message['To']} via {settings.smtp_host}:{settings.smtp_port}")
