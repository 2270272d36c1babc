"""Shared pieces for the GitHub event formatters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ghnotify.services.markdown import escape, escape_url
from ghnotify.services.telegram import InlineButton

GITHUB_URL = "https://github.com"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class RenderedMessage:
    """MarkdownV2 text plus an optional single URL button."""

    text: str
    button: Optional[InlineButton] = None


Formatter = Callable[[Mapping[str, Any]], RenderedMessage]


def with_button(text: str, label: str, url: Optional[str]) -> RenderedMessage:
    if not label or not url:
        return RenderedMessage(text)
    return RenderedMessage(text, InlineButton(text=label, url=url))


def dig(data: Any, path: Sequence[str]) -> Any:
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def ensure_mapping(payload: Any) -> Mapping[str, Any]:
    return payload if isinstance(payload, Mapping) else {}


def action_of(payload: Mapping[str, Any]) -> str:
    return str(payload.get("action") or "").strip()


def actor(payload: Mapping[str, Any]) -> str:
    for path in (
        ("sender", "login"),
        ("pusher", "name"),
        ("organization", "login"),
        ("installation", "account", "login"),
    ):
        value = dig(payload, path)
        if isinstance(value, str) and value:
            return value
    return ""


def repo_name(payload: Mapping[str, Any]) -> str:
    for path in (
        ("repository", "full_name"),
        ("repository", "name"),
    ):
        value = dig(payload, path)
        if isinstance(value, str) and value:
            return value
    return ""


def repo_url(payload: Mapping[str, Any]) -> str:
    url = dig(payload, ("repository", "html_url"))
    if isinstance(url, str) and url:
        return url
    name = repo_name(payload)
    return f"{GITHUB_URL}/{name}" if name else ""


def org_login(payload: Mapping[str, Any]) -> str:
    return dig(payload, ("organization", "login")) or ""


def repo_link(full_name: Optional[str]) -> str:
    if not full_name:
        return escape("?")
    return f"[{escape(full_name)}]({GITHUB_URL}/{escape_url(full_name)})"


def user_link(login: Optional[str]) -> str:
    if not login:
        return escape(UNKNOWN)
    return f"[{escape(login)}]({GITHUB_URL}/{escape_url(login)})"


def link(label: Any, url: Optional[str]) -> str:
    if not url:
        return escape(str(label))
    return f"[{escape(str(label))}]({escape_url(url)})"


def code(value: Any) -> str:
    return f"`{escape(str(value))}`"


def bold(value: Any) -> str:
    return f"*{escape(str(value))}*"


def italic(value: Any) -> str:
    return f"_{escape(str(value))}_"


def row(emoji: str, label: str, value: str) -> str:
    """`<emoji> *Label:* value` where value is already escaped."""
    return f"{emoji} *{escape(label)}:* {value}"


def note(emoji: str, text: str) -> str:
    return f"{emoji} {italic(text)}"


def logins(items: Any, key: str = "login") -> list[str]:
    if not isinstance(items, Iterable) or isinstance(items, (str, bytes)):
        return []
    out = []
    for item in items:
        value = item.get(key) if isinstance(item, Mapping) else None
        if value:
            out.append(str(value))
    return out


def short_sha(sha: Optional[str]) -> str:
    return (sha or "")[:7]


def join(lines: Iterable[str]) -> str:
    return "\n".join(line for line in lines if line is not None)
