"""Client-side state for the audit form.

Nothing in the server package imports this module: it is the entry point a
form front end drives, handing submissions to either ``local_submitter`` or
``audit_form.lib.api_client.ApiSubmitter``.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from audit_form.core.mailer import send_message
from audit_form.core.settings import Settings
from audit_form.lib.schemas import DeliveryFailure, SubmissionResult, SubmitSuccess, ValidationFailure
from audit_form.lib.submission import Sender, submit_form

log = logging.getLogger("uvicorn.error")

COUNTRY_CODES = [
    {"code": "+61", "country": "AU", "flag": "\U0001F1E6\U0001F1FA"},
    {"code": "+92", "country": "PK", "flag": "\U0001F1F5\U0001F1F0"},
    {"code": "+1", "country": "US", "flag": "\U0001F1FA\U0001F1F8"},
    {"code": "+44", "country": "UK", "flag": "\U0001F1EC\U0001F1E7"},
    {"code": "+91", "country": "IN", "flag": "\U0001F1EE\U0001F1F3"},
]
DEFAULT_COUNTRY_CODE = COUNTRY_CODES[0]["code"]
NOTIFICATION_MS = 5000

Submitter = Callable[[Dict[str, str]], SubmissionResult]


def default_values() -> Dict[str, str]:
    return {
        "name": "",
        "email": "",
        "phone": "",
        "countryCode": DEFAULT_COUNTRY_CODE,
        "website": "",
        "message": "",
    }


def local_submitter(settings: Settings, send: Sender = send_message) -> Submitter:
    """Submitter that runs the handler in-process."""
    def _submit(values: Dict[str, str]) -> SubmissionResult:
        return submit_form(values, settings, send=send)
    return _submit


@dataclass
class Notification:
    kind: str  # "success" | "error"
    message: str
    duration_ms: int = NOTIFICATION_MS


@dataclass
class AuditFormController:
    submitter: Submitter
    values: Dict[str, str] = field(default_factory=default_values)
    errors: Dict[str, str] = field(default_factory=dict)
    pending: bool = False
    dropdown_open: bool = False
    notifications: List[Notification] = field(default_factory=list)

    def change(self, name: str, value: str) -> None:
        if name not in self.values:
            raise KeyError(name)
        self.values[name] = value
        if self.errors.get(name):
            self.errors[name] = ""

    def toggle_dropdown(self) -> None:
        self.dropdown_open = not self.dropdown_open

    def close_dropdown(self) -> None:
        self.dropdown_open = False

    def select_country_code(self, code: str) -> None:
        self.values["countryCode"] = code
        self.dropdown_open = False

    def field_error(self, name: str) -> Optional[str]:
        return self.errors.get(name) or None

    def submit(self) -> Optional[SubmissionResult]:
        """Send the current values once and fold the outcome back into state.

        Returns None when a submission is already in flight.
        """
        if self.pending:
            return None
        self.pending = True
        self.errors = {}
        try:
            try:
                result = self.submitter(dict(self.values))
            except Exception as e:
                log.warning(f"[form] submitter failed: {e}")
                result = DeliveryFailure()
            self._apply(result)
        finally:
            self.pending = False
        return result

    def _apply(self, result: Any) -> None:
        if isinstance(result, SubmitSuccess):
            self.notifications.append(Notification("success", result.message))
            self.values = default_values()
            return
        if isinstance(result, ValidationFailure):
            errors: Dict[str, str] = {}
            for err in result.errors:
                errors[err.field] = err.message
            self.errors = errors
        self.notifications.append(Notification("error", result.message))
