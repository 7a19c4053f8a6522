# audit_form/routers/audit.py
import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from audit_form.core.settings import Settings
from audit_form.dependencies import get_mail_sender, get_settings
from audit_form.lib.schemas import SubmitSuccess, ValidationFailure
from audit_form.lib.submission import Sender, submit_form

router = APIRouter(prefix="/api", tags=["audit"])


async def _read_payload(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


@router.post("/audit")
async def submit_audit(
    request: Request,
    settings: Settings = Depends(get_settings),
    send: Sender = Depends(get_mail_sender),
):
    payload = await _read_payload(request)
    # smtplib blocks
    result = await run_in_threadpool(submit_form, payload, settings, send)

    if isinstance(result, SubmitSuccess):
        status = 200
    elif isinstance(result, ValidationFailure):
        status = 422
    else:
        status = 502
    return JSONResponse(status_code=status, content=result.model_dump())
