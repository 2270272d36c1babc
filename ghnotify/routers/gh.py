"""Ruter GH?"""

from __future__ import annotations

import json
from typing import Any, Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import PlainTextResponse

from ghnotify.config import Settings, get_settings
from ghnotify.errors import NotifierError, WebhookError
from ghnotify.logger import get_logger
from ghnotify.services.github import render_event, select_formatter
from ghnotify.services.markdown import escape
from ghnotify.services.telegram import send_message
from ghnotify.utils import gh_verify

log = get_logger(__name__)

router = APIRouter(tags=["github"])

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _decode_payload(body: bytes, content_type: str | None) -> dict[str, Any]:
    """Accept both GitHub content types: raw JSON or form-encoded `payload=`."""
    raw: str | bytes = body
    if content_type and content_type.split(";", 1)[0].strip() == _FORM_CONTENT_TYPE:
        form = parse_qs(body.decode("utf-8"))
        raw = (form.get("payload") or [""])[0]
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("webhook payload is not a JSON object")
    return payload


@router.post("/github", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    chat_id: Optional[str] = Query(None),
    x_github_event: Optional[str] = Header(None),
    x_hub_signature_256: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
):
    """
    GitHub webhook endpoint.

    The delivery is rendered according to `X-GitHub-Event` and forwarded to the
    Telegram chat named by the `chat_id` query parameter.
    """
    body = await request.body()
    if not body:
        raise WebhookError("Invalid payload", 401)
    if settings.webhook_secret and not gh_verify(
        settings.webhook_secret, body, x_hub_signature_256
    ):
        log.warning("webhook_signature_mismatch", github_event=x_github_event)
        raise WebhookError("Invalid payload", 401)

    if not x_github_event:
        log.warning("webhook_missing_event_header")
        raise WebhookError("Error parsing webhook", 500)
    try:
        payload = _decode_payload(body, request.headers.get("content-type"))
    except ValueError as exc:
        log.warning("webhook_parse_failed", github_event=x_github_event, error=str(exc))
        raise WebhookError("Error parsing webhook", 500) from exc

    message = render_event(x_github_event, payload)

    if not chat_id:
        raise WebhookError("Missing chat_id query parameter", 400)
    if not message.text:
        return "OK"

    if select_formatter(x_github_event) is None:
        # the tag itself may contain reserved characters such as "_"
        fallback = f"Unhandled event type: {escape(x_github_event)}"
        try:
            await send_message(settings, chat_id, fallback)
        except NotifierError as exc:
            log.warning("unhandled_event_notify_failed", github_event=x_github_event, error=str(exc))
        return message.text

    await send_message(settings, chat_id, message.text, message.button)
    log.info("webhook_delivered", github_event=x_github_event, chat_id=chat_id)
    return message.text
