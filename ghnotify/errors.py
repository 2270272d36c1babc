"""Exceptions raised while relaying webhooks."""

from __future__ import annotations


class WebhookError(Exception):
    """Inbound request rejected; `status_code` is sent back to GitHub."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotifierError(Exception):
    """Base class for failures while sending to Telegram."""


class ConfigError(NotifierError):
    """Required configuration (the bot token) is missing."""


class TelegramAPIError(NotifierError):
    """Telegram answered with a non-success response or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
