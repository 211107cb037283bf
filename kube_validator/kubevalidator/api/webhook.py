"""GitHub webhook endpoint."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request
from pydantic import BaseModel

from kubevalidator.deps import get_check_suite_handler, get_settings
from kubevalidator.github.handler import HANDLED_ACTIONS, CheckSuiteHandler
from kubevalidator.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


class WebhookResponse(BaseModel):
    accepted: bool
    message: str = ""


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature.removeprefix("sha256="))


@router.post("/webhook", response_model=WebhookResponse)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_github_event: str = Header("", alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
    settings: Settings = Depends(get_settings),
    handler: CheckSuiteHandler = Depends(get_check_suite_handler),
) -> WebhookResponse:
    """Accept a GitHub event and validate check suites in the background."""
    body = await request.body()
    if settings.webhook_secret and not verify_signature(
        settings.webhook_secret, body, x_hub_signature_256
    ):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    try:
        event = json.loads(body)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON payload: {e}") from e

    action = event.get("action") if isinstance(event, dict) else None
    if x_github_event != "check_suite" or action not in HANDLED_ACTIONS:
        logger.debug("Ignoring %s event (action %s)", x_github_event, action)
        return WebhookResponse(accepted=False, message=f"Ignored {x_github_event} event")

    background_tasks.add_task(handler.handle, event)
    return WebhookResponse(accepted=True, message="Validation scheduled")


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
