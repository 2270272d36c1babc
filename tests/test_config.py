"""Tests for environment-driven settings and helpers."""

import hashlib
import hmac

from ghnotify.config import Settings
from ghnotify.utils import gh_verify, redact_token


def test_from_env(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", " 1:abc ")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("TELEGRAM_API_BASE", "https://tg.test/")
    monkeypatch.setenv("LOG_JSON", "true")
    settings = Settings.from_env()
    assert settings.bot_token == "1:abc"
    assert settings.port == 8080
    assert settings.telegram_api_base == "https://tg.test"
    assert settings.log_json is True


def test_from_env_defaults(monkeypatch):
    for name in ("BOT_TOKEN", "PORT", "GITHUB_WEBHOOK_SECRET", "TELEGRAM_TIMEOUT", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.bot_token == ""
    assert settings.port == 3000
    assert settings.webhook_secret == ""
    assert settings.telegram_timeout == 15.0
    assert settings.log_json is False


def test_gh_verify():
    body = b'{"zen": "hi"}'
    sig = "sha256=" + hmac.new(b"k", body, hashlib.sha256).hexdigest()
    assert gh_verify("k", body, sig)
    assert not gh_verify("k", body + b" ", sig)
    assert not gh_verify("k", body, None)
    assert not gh_verify("k", body, "sha1=abc")


def test_redact_token():
    assert redact_token("x /bot1:abc/y", "1:abc") == "x /bot$Bot/y"
    assert redact_token("nothing here", "") == "nothing here"
