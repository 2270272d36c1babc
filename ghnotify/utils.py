"""the beautiful world start from here."""

from __future__ import annotations

import hashlib
import hmac

TOKEN_PLACEHOLDER = "$Bot"


def gh_verify(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Verify GitHub webhook HMAC signature (X-Hub-Signature-256).

    Returns
    -------
    bool
        True if valid, False otherwise.
    """
    if not signature_header or not signature_header.startswith("sha256="):
        return False
    sig = signature_header.split("=", 1)[1]
    mac = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()
    return hmac.compare_digest(mac, sig)


def redact_token(text: str, token: str) -> str:
    """
    Replace every occurrence of the bot token in `text`.

    Example
    -------
    'POST /bot123:AA.../sendMessage' → 'POST /bot$Bot/sendMessage'
    """
    if not token:
        return text
    return text.replace(token, TOKEN_PLACEHOLDER)
