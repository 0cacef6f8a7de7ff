"""Immutable per-bot configuration shared by every dispatch call."""

from __future__ import annotations

from dataclasses import dataclass, field

import requests

from botwire.redact import redact

API_BASE_URL = "https://api.telegram.org/bot"
FILE_BASE_URL = "https://api.telegram.org/file/bot"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class BotContext:
    """Token, endpoints, and HTTP session for one bot.

    Built once and passed to every dispatch; nothing mutates it afterwards,
    so a single context may be shared across threads.  The ``requests``
    session is only used to prepare and send requests.
    """

    token: str
    api_base_url: str = API_BASE_URL
    file_base_url: str = FILE_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    session: requests.Session = field(default_factory=requests.Session, repr=False, compare=False)

    def api_url(self, method: str) -> str:
        """``{api_base_url}{token}/{method}``"""
        return f"{self.api_base_url}{self.token}/{method}"

    def file_url(self, file_path: str) -> str:
        """Download URL for a ``file_path`` returned by ``getFile``."""
        return f"{self.file_base_url}{self.token}/{file_path}"

    def redact(self, text: str) -> str:
        return redact(text, self.token)

    def __repr__(self) -> str:
        return (
            f"BotContext(token={self.redact(self.token)!r}, api_base_url={self.api_base_url!r}, "
            f"file_base_url={self.file_base_url!r}, timeout={self.timeout!r}, verbose={self.verbose!r})"
        )
