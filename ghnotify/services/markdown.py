"""Telegram MarkdownV2 escaping and safe conversion of GitHub free text.

GitHub bodies (issues, pull requests, releases, comments) mix Markdown with
raw HTML. Escaping them blindly destroys links and code blocks; not escaping
them gets the message rejected by Telegram. `format_safe` converts the HTML
part to Markdown, shields the constructs Telegram understands, escapes the
rest and puts the shielded spans back.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from markdownify import markdownify

from ghnotify.logger import get_logger

log = get_logger(__name__)

RESERVED_CHARS = "_*[]()~`>#+-=|{}.!"

_ESCAPE_RE = re.compile("([" + re.escape(RESERVED_CHARS) + "])")
_URL_ESCAPE_RE = re.compile(r"([()])")

# <octocat@github.com>, <mailto:octocat@github.com>
_EMAIL_RE = re.compile(r"<(?:mailto:)?[^<>\s@]+@[^<>\s@]+>")

# Fences first so their backticks are never read as inline code.
_CODE_PATTERN = r"```[\s\S]*?```|`[^`\n]+`"
_CODE_RE = re.compile(_CODE_PATTERN)
_PROTECTED_RE = re.compile(_CODE_PATTERN + r"|\[[^\[\]\n]+\]\([^()\s]+\)")

_HTML_TAG_RE = re.compile(r"</?[a-zA-Z][a-zA-Z0-9]*(?:\s[^<>]*)?/?>")

_SENTINEL = "⁣"

QUOTE_MAX_LINES = 10
QUOTE_MAX_CHARS = 800
QUOTE_HEAD_LINES = 5
EXPANDABLE_OPEN = "**>"
EXPANDABLE_CLOSE = "||"

TRUNCATION_MARKER = "..."


def escape(text: Optional[str]) -> str:
    """Backslash-escape every MarkdownV2 reserved character in `text`."""
    if not text:
        return ""
    return _ESCAPE_RE.sub(r"\\\1", str(text))


def escape_url(text: Optional[str]) -> str:
    """Escape the parentheses of a URL used inside `[label](url)`."""
    if not text:
        return ""
    return _URL_ESCAPE_RE.sub(r"\\\1", str(text))


@dataclass
class ProtectedSpans:
    """Ordered (placeholder, original) pairs for one protect/restore pass."""

    tag: str
    spans: list[tuple[str, str]] = field(default_factory=list)

    def _placeholder(self, index: int) -> str:
        return f"{_SENTINEL}{self.tag}{index}{_SENTINEL}"

    def protect(self, pattern: re.Pattern[str], text: str) -> str:
        """Swap every match of `pattern` for a numbered placeholder."""

        def _swap(match: re.Match[str]) -> str:
            token = self._placeholder(len(self.spans))
            self.spans.append((token, match.group(0)))
            return token

        return pattern.sub(_swap, text)

    def restore(
        self, text: str, transform: Callable[[str], str] | None = None
    ) -> str:
        """
        Put the originals back, latest first, so placeholders captured
        inside a later span are restored as well.

        `transform` is applied to each placeholder before searching for it,
        for text that went through the escaper after protection.
        """
        for token, original in reversed(self.spans):
            needle = transform(token) if transform else token
            text = text.replace(needle, original)
        return text

    def __len__(self) -> int:
        return len(self.spans)


def html_to_markdown(text: str) -> str:
    """Convert HTML fragments to Markdown, leaving escaping to `escape`."""
    return markdownify(
        text,
        heading_style="ATX",
        bullets="-",
        code_language="",
        escape_asterisks=False,
        escape_underscores=False,
        escape_misc=False,
    )


def format_safe(raw: Optional[str]) -> str:
    """Render GitHub free text as MarkdownV2 that Telegram will accept."""
    if not raw:
        return ""

    constructs = ProtectedSpans("MDKEEP")
    text = raw
    if _HTML_TAG_RE.search(raw):
        # code and e-mail addresses must reach the output untouched
        text = constructs.protect(_CODE_RE, raw)
        emails = ProtectedSpans("MDMAIL")
        text = emails.protect(_EMAIL_RE, text)
        try:
            text = html_to_markdown(text)
        except Exception as exc:  # fail open: keep the author's text
            log.warning("markdown_conversion_failed", error=str(exc))
            text = raw
            constructs = ProtectedSpans("MDKEEP")
        else:
            text = emails.restore(text)

    text = constructs.protect(_PROTECTED_RE, text)
    text = escape(text)
    return constructs.restore(text, transform=escape)


def format_quoted(body: Optional[str]) -> str:
    """
    Blockquote `format_safe(body)`.

    Long bodies keep the first QUOTE_HEAD_LINES lines visible and fold the
    rest into an expandable quote.
    """
    safe = format_safe(body)
    if not safe.strip():
        return ""

    lines = safe.split("\n")
    if len(lines) <= QUOTE_MAX_LINES and len(safe) <= QUOTE_MAX_CHARS:
        return "\n".join(f">{line}" for line in lines)

    head = [f">{line}" for line in lines[:QUOTE_HEAD_LINES]]
    tail = [f">{line}" for line in lines[QUOTE_HEAD_LINES:]]
    if not tail:
        # A few very long lines: fold everything after the first one.
        head, tail = head[:1], head[1:] or [">"]
    tail[-1] += EXPANDABLE_CLOSE
    return "\n".join([*head, EXPANDABLE_OPEN, *tail])


def truncate(text: Optional[str], limit: int) -> str:
    """Cut raw text to `limit` characters, marking the cut."""
    if not text:
        return ""
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def first_line(text: Optional[str], limit: int = 120) -> str:
    lines = (text or "").splitlines()
    return truncate(lines[0], limit) if lines else ""
