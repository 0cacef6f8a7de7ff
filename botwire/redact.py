"""Scrub the bot token out of any text that may be logged or surfaced."""

from __future__ import annotations

from urllib.parse import quote

TOKEN_PLACEHOLDER = "<BOT_TOKEN>"


def redact(text: str, token: str | None) -> str:
    """Replace every occurrence of *token* in *text* with the placeholder.

    Both the raw token and its percent-encoded form (``:`` becomes ``%3A`` in
    some URL renderings) are replaced.
    """
    if not token or not text:
        return text
    redacted = text.replace(token, TOKEN_PLACEHOLDER)
    quoted = quote(token, safe="")
    if quoted != token:
        redacted = redacted.replace(quoted, TOKEN_PLACEHOLDER)
    return redacted
