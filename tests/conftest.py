"""Shared fixtures for the botwire test-suite."""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.context import BotContext

TOKEN = "123456:ABC-secret_token"

# Smallest useful PNG prefix: signature + IHDR chunk header.
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 16


@pytest.fixture()
def context() -> BotContext:
    """A context pointing at a fake API host."""
    return BotContext(token=TOKEN, api_base_url="https://api.example.com/bot")


def make_response(body: bytes = b'{"ok":true,"result":true}') -> MagicMock:
    """Build a stand-in for a streamed :class:`requests.Response`."""
    response = MagicMock()
    response.content = body
    return response
