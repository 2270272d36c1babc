"""the beautiful world start from here."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from ghnotify.config import Settings
from ghnotify.errors import NotifierError, WebhookError
from ghnotify.logger import get_logger, setup_logging
from ghnotify.routers import gh, info
from ghnotify.utils import redact_token

log = get_logger(__name__)


async def _webhook_error(request: Request, exc: WebhookError) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=exc.status_code)


async def _notifier_error(request: Request, exc: NotifierError) -> PlainTextResponse:
    settings: Settings = request.app.state.settings
    message = redact_token(str(exc), settings.bot_token)
    log.error("telegram_send_failed", error=message)
    return PlainTextResponse(message, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the ASGI app; `settings` defaults to the process environment."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_json)

    app = FastAPI(title="GitHub → Telegram Notifier")
    app.state.settings = settings
    app.add_exception_handler(WebhookError, _webhook_error)
    app.add_exception_handler(NotifierError, _notifier_error)

    app.include_router(info.router)
    app.include_router(gh.router)
    return app


app = create_app()
