"""Yet another tele services"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel

from ghnotify.config import Settings
from ghnotify.errors import ConfigError, TelegramAPIError
from ghnotify.logger import get_logger

log = get_logger(__name__)

PARSE_MODE = "MarkdownV2"

JSONDict = dict[str, Any]


class InlineButton(BaseModel):
    """One URL button under the message."""

    text: str
    url: str


class InlineKeyboardMarkup(BaseModel):
    inline_keyboard: list[list[InlineButton]]

    @classmethod
    def single(cls, button: InlineButton) -> "InlineKeyboardMarkup":
        return cls(inline_keyboard=[[button]])


class SendMessagePayload(BaseModel):
    """Body of the Bot API `sendMessage` call."""

    chat_id: str
    text: str
    parse_mode: str = PARSE_MODE
    disable_web_page_preview: bool = True
    reply_markup: Optional[InlineKeyboardMarkup] = None


def build_payload(
    chat_id: int | str, text: str, button: Optional[InlineButton] = None
) -> JSONDict:
    payload = SendMessagePayload(
        chat_id=str(chat_id),
        text=text,
        reply_markup=InlineKeyboardMarkup.single(button) if button else None,
    )
    return payload.model_dump(exclude_none=True)


async def send_message(
    settings: Settings,
    chat_id: int | str,
    text: str,
    button: Optional[InlineButton] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> JSONDict:
    """
    Send one MarkdownV2 message, optionally with a single URL button.

    Raises
    ------
    ConfigError
        No bot token configured; nothing is sent.
    TelegramAPIError
        Non-2xx answer, `"ok": false` body, or transport failure.
    """
    if not settings.bot_token:
        log.error("telegram_token_missing")
        raise ConfigError("telegram bot token is not set")

    api = f"{settings.telegram_api_base}/bot{settings.bot_token}/sendMessage"
    payload = build_payload(chat_id, text, button)

    try:
        async with httpx.AsyncClient(
            timeout=settings.telegram_timeout, transport=transport
        ) as client:
            resp = await client.post(api, json=payload)
    except httpx.HTTPError as exc:
        log.error("telegram_request_failed", chat_id=str(chat_id), error=str(exc))
        raise TelegramAPIError(f"telegram request failed: {exc}") from exc

    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    if not resp.is_success or not data.get("ok", True):
        log.error(
            "telegram_error_response",
            chat_id=str(chat_id),
            status=resp.status_code,
            body=resp.text,
        )
        raise TelegramAPIError(
            f"telegram API error: {resp.status_code} {resp.reason_phrase}".rstrip(),
            status_code=resp.status_code,
        )

    log.info("telegram_message_sent", chat_id=str(chat_id))
    return data
