# audit_form/dependencies.py
from fastapi import Request

from audit_form.core.mailer import send_message
from audit_form.lib.submission import Sender
from audit_form.core.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mail_sender() -> Sender:
    return send_message
