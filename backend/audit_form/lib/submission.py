import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError

from audit_form.core.mailer import send_message
from audit_form.core.settings import Settings
from audit_form.lib.email_templates import build_message
from audit_form.lib.schemas import (
    AuditRequest,
    DeliveryFailure,
    FieldError,
    SubmissionResult,
    SubmitSuccess,
    ValidationFailure,
)

log = logging.getLogger("uvicorn.error")

Sender = Callable[..., None]


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors: List[FieldError] = []
    seen = set()
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        # first failing rule per field only
        if field in seen:
            continue
        seen.add(field)
        errors.append(FieldError(field=field, message=err["msg"]))
    return errors


def validate_submission(raw: Any) -> Tuple[Optional[AuditRequest], List[FieldError]]:
    try:
        return AuditRequest.model_validate(raw), []
    except ValidationError as exc:
        return None, _field_errors(exc)


def submit_form(
    raw: Any,
    settings: Settings,
    send: Sender = send_message,
    submitted_at: Optional[datetime] = None,
) -> SubmissionResult:
    """Validate a raw form payload and relay it as an email.

    Never raises: every outcome comes back as one of the result variants.
    Delivery is a single attempt, and transport errors are only logged.
    """
    log.info(f"[audit] relay {settings.relay_summary()}")

    req, errors = validate_submission(raw)
    if errors:
        log.info(f"[audit] rejected submission, invalid fields: {[e.field for e in errors]}")
        return ValidationFailure(errors=errors)

    try:
        moment = submitted_at or datetime.now(timezone.utc)
        send(build_message(req, settings, moment), settings)
    except Exception as e:
        log.exception(f"[audit] form submission failed: {e}")
        return DeliveryFailure()

    return SubmitSuccess()
