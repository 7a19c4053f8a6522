"""HTTP submitter used by ``AuditFormController`` to reach ``POST /api/audit``."""
import logging
from typing import Dict

import httpx

from audit_form.lib.schemas import DeliveryFailure, SubmissionResult, parse_result

log = logging.getLogger("uvicorn.error")


class ApiSubmitter:
    """Posts form values to the audit endpoint over HTTP.

    Any JSON body shaped like a result is honoured whatever the status code;
    everything else collapses into the generic failure.
    """

    def __init__(self, client: httpx.Client, path: str = "/api/audit"):
        self.client = client
        self.path = path

    def __call__(self, values: Dict[str, str]) -> SubmissionResult:
        try:
            resp = self.client.post(self.path, json=values)
        except httpx.HTTPError as e:
            log.warning(f"[form] request to {self.path} failed: {e}")
            return DeliveryFailure()
        try:
            return parse_result(resp.json())
        except ValueError as e:
            log.warning(f"[form] unexpected response {resp.status_code} from {self.path}: {e}")
            return DeliveryFailure()
